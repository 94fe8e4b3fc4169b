"""Recursive directory walk that streams entries into an archive session."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath, PurePosixPath
from typing import Protocol

from .archive_session import ArchiveSession
from .errors import (
    ArchiverError,
    DirectoryReadError,
    FileReadError,
    StripPrefixError,
)
from .ignore_rules import is_ignored
from .models import IgnoreRuleSet, WalkStats
from .timestamps import estimate_zip_timestamp

logger = logging.getLogger(__name__)


class WalkReporter(Protocol):
    def file_compressing(self, path: Path) -> None: ...

    def entry_failed(self, path: Path, is_directory: bool, error: ArchiverError) -> None: ...


def walk_directory(
    session: ArchiveSession,
    ignore_rule_set: IgnoreRuleSet,
    common_root: PurePath,
    directory: Path,
    *,
    reporter: WalkReporter | None = None,
    stats: WalkStats | None = None,
) -> WalkStats:
    """Archive ``directory`` and everything beneath it, pre-order.

    Failures of the directory itself (listing, naming, marking its entry)
    raise. Failures of any descendant are reported, counted in ``stats`` and
    skipped so that siblings are still archived.
    """
    walk_stats = stats if stats is not None else WalkStats()
    _walk(
        session=session,
        ignore_rule_set=ignore_rule_set,
        common_root=common_root,
        directory=directory,
        reporter=reporter,
        stats=walk_stats,
    )
    return walk_stats


def _walk(
    *,
    session: ArchiveSession,
    ignore_rule_set: IgnoreRuleSet,
    common_root: PurePath,
    directory: Path,
    reporter: WalkReporter | None,
    stats: WalkStats,
) -> None:
    if is_ignored(directory, ignore_rule_set):
        logger.debug("Pruned ignored directory %s", directory)
        return

    children = _list_children(directory)
    relative_path = relative_entry_path(directory, common_root)

    # The common root itself has no name inside the archive.
    if relative_path.parts:
        session.add_directory(relative_path, estimate_zip_timestamp(directory))
        stats.directory_entries += 1

    for child_path, child_is_directory in children:
        try:
            if child_is_directory:
                _walk(
                    session=session,
                    ignore_rule_set=ignore_rule_set,
                    common_root=common_root,
                    directory=child_path,
                    reporter=reporter,
                    stats=stats,
                )
            else:
                _compress_file(
                    session=session,
                    ignore_rule_set=ignore_rule_set,
                    common_root=common_root,
                    file_path=child_path,
                    reporter=reporter,
                    stats=stats,
                )
        except ArchiverError as exc:
            stats.failures += 1
            kind = "sub-directory" if child_is_directory else "sub-file"
            logger.warning("Failed to compress %s %s: %s", kind, child_path, exc)
            if reporter is not None:
                reporter.entry_failed(child_path, child_is_directory, exc)


def _compress_file(
    *,
    session: ArchiveSession,
    ignore_rule_set: IgnoreRuleSet,
    common_root: PurePath,
    file_path: Path,
    reporter: WalkReporter | None,
    stats: WalkStats,
) -> None:
    if is_ignored(file_path, ignore_rule_set):
        return

    if reporter is not None:
        reporter.file_compressing(file_path)

    try:
        source = open(file_path, "rb")
    except OSError as exc:
        raise FileReadError(str(exc)) from exc

    with source:
        relative_path = relative_entry_path(file_path, common_root)
        session.add_file(
            relative_path,
            estimate_zip_timestamp(file_path),
            source,
            size=os.fstat(source.fileno()).st_size,
        )

    stats.file_entries += 1
    logger.debug("Compressed file %s", file_path)


def _list_children(directory: Path) -> list[tuple[Path, bool]]:
    """Return ``(path, is_directory)`` for each directory or regular file child.

    Children whose type cannot be read, symlinks and special files are left
    out without a report.
    """
    children: list[tuple[Path, bool]] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        children.append((directory / entry.name, True))
                    elif entry.is_file(follow_symlinks=False):
                        children.append((directory / entry.name, False))
                except OSError as exc:
                    logger.debug("Skipped uninspectable entry %s: %s", entry.path, exc)
    except OSError as exc:
        raise DirectoryReadError(str(exc)) from exc

    children.sort(key=lambda child: child[0].name)
    return children


def relative_entry_path(path: PurePath, common_root: PurePath) -> PurePosixPath:
    try:
        relative = path.relative_to(common_root)
    except ValueError as exc:
        raise StripPrefixError(str(exc)) from exc
    return PurePosixPath(*relative.parts)
