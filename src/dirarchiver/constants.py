"""Literal constants used by dirarchiver."""

from __future__ import annotations

import zipfile

APP_NAME = "dirarchiver"

ARCHIVE_COMMENT_TEMPLATE = "Directory Archiver [{profile_name}]"

COMPRESSION_METHOD = zipfile.ZIP_BZIP2
COMPRESSION_LEVEL = 9

# Ten average Julian years (3652.5 days) after the Unix epoch.
ZIP_EPOCH_OFFSET_SECONDS = 315_576_000
ZIP_EPOCH_YEAR = 1980
ZIP_MAX_YEAR = 2107
AVERAGE_YEAR_DAYS = 365.2425
ZIP_DEFAULT_DATE_TIME = (1980, 1, 1, 0, 0, 0)

PROFILE_DIRECTORIES_KEY = "directories"
PROFILE_DIRECTORIES_LEGACY_KEY = "dirs"

SUCCESS_MESSAGE = "Successfully archived profile."
FAILURE_MESSAGE_TEMPLATE = "Failed to archive profile: {cause}."

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
