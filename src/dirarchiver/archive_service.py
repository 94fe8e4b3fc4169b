"""Archive workflow orchestration."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Protocol

from .archive_session import ArchiveSession
from .common_root import resolve_common_root
from .constants import ARCHIVE_COMMENT_TEMPLATE
from .errors import ArchiverError
from .ignore_rules import build_ignore_rule_set
from .models import ArchiveSummary, Profile, WalkStats
from .presenters import (
    render_archiving_count,
    render_creating_archive,
    render_loading_profile,
)
from .profile import load_profile
from .tree_walker import WalkReporter, walk_directory

logger = logging.getLogger(__name__)


class RunReporter(WalkReporter, Protocol):
    def message(self, line: str) -> None: ...

    def directory_started(self, directory: Path) -> None: ...

    def top_level_failed(self, directory: Path, error: ArchiverError) -> None: ...

    def finished(self, summary: ArchiveSummary) -> None: ...


def archive_profile(
    *,
    profile_path: Path,
    output_path: Path,
    reporter: RunReporter | None = None,
) -> ArchiveSummary:
    """Load the profile at ``profile_path`` and archive it to ``output_path``."""
    if reporter is not None:
        reporter.message(render_loading_profile(profile_path))
    profile = load_profile(profile_path)
    return archive_directories(profile=profile, output_path=output_path, reporter=reporter)


def archive_directories(
    *,
    profile: Profile,
    output_path: Path,
    reporter: RunReporter | None = None,
) -> ArchiveSummary:
    """Walk every configured directory into a single archive.

    Profile, common root, archive creation and finalization failures raise.
    A failing top-level directory is reported and the remaining directories
    are still archived.
    """
    if reporter is not None:
        reporter.message(render_creating_archive(profile.name))

    started = time.perf_counter()
    common_root = resolve_common_root(profile.directories)
    ignore_rule_set = build_ignore_rule_set(profile.ignores)
    logger.info("Resolved common root %s", common_root)

    stats = WalkStats()
    with ArchiveSession.open(output_path) as session:
        if reporter is not None:
            reporter.message(render_archiving_count(len(profile.directories)))

        for directory in profile.directories:
            if reporter is not None:
                reporter.directory_started(directory)
            try:
                walk_directory(
                    session,
                    ignore_rule_set,
                    common_root,
                    directory,
                    reporter=reporter,
                    stats=stats,
                )
            except ArchiverError as exc:
                stats.failures += 1
                logger.warning("Failed to archive directory %s: %s", directory, exc)
                if reporter is not None:
                    reporter.top_level_failed(directory, exc)

        if reporter is not None:
            reporter.message("Finishing archive...")
        session.finish(ARCHIVE_COMMENT_TEMPLATE.format(profile_name=profile.name))

    summary = ArchiveSummary(
        output_path=output_path,
        profile_name=profile.name,
        common_root=common_root,
        directory_entry_count=stats.directory_entries,
        file_entry_count=stats.file_entries,
        failure_count=stats.failures,
        elapsed_seconds=time.perf_counter() - started,
    )
    if reporter is not None:
        reporter.finished(summary)
    return summary
