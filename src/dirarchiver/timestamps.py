"""Zip entry timestamp estimation."""

from __future__ import annotations

import logging
import os
import time

from .constants import (
    AVERAGE_YEAR_DAYS,
    ZIP_DEFAULT_DATE_TIME,
    ZIP_EPOCH_OFFSET_SECONDS,
    ZIP_EPOCH_YEAR,
    ZIP_MAX_YEAR,
)
from .models import ZipDateTime

logger = logging.getLogger(__name__)


def estimate_zip_timestamp(path: str | os.PathLike[str]) -> ZipDateTime:
    """Return an approximate zip ``date_time`` for ``path``.

    The modification time falls back to the current time when it cannot be
    read. Only the year is derived from the elapsed time (average-length
    years); day and month are always 1. Hour, minute and second come from
    the elapsed seconds directly.
    """
    try:
        modified = os.stat(path).st_mtime
    except OSError as exc:
        logger.debug("Using current time for %s: %s", path, exc)
        modified = time.time()

    return zip_timestamp_from_epoch_seconds(modified)


def zip_timestamp_from_epoch_seconds(epoch_seconds: float) -> ZipDateTime:
    seconds = max(epoch_seconds - ZIP_EPOCH_OFFSET_SECONDS, 0.0)

    year = ZIP_EPOCH_YEAR + int(seconds / 60 / 60 / 24 / AVERAGE_YEAR_DAYS)
    hour = int(seconds / 3600 % 24)
    minute = int(seconds / 60 % 60)
    second = int(seconds % 60)

    if not ZIP_EPOCH_YEAR <= year <= ZIP_MAX_YEAR:
        return ZIP_DEFAULT_DATE_TIME
    return (year, 1, 1, hour, minute, second)
