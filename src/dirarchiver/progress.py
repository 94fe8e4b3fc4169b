"""Console progress rendering helpers."""

from __future__ import annotations

from pathlib import Path

from .errors import ArchiverError
from .models import ArchiveSummary
from .presenters import (
    render_archive_summary,
    render_directory_failed,
    render_directory_started,
    render_entry_failed,
    render_file_compressing,
)


class ConsoleProgressReporter:
    """Prints one line per progress event.

    With ``quiet`` set, per-file lines are dropped; directory, failure and
    summary lines are always printed.
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self._quiet = quiet

    def message(self, line: str) -> None:
        print(line)

    def directory_started(self, directory: Path) -> None:
        print(render_directory_started(directory))

    def top_level_failed(self, directory: Path, error: ArchiverError) -> None:
        print(render_directory_failed(directory, error))

    def file_compressing(self, path: Path) -> None:
        if self._quiet:
            return
        print(render_file_compressing(path))

    def entry_failed(self, path: Path, is_directory: bool, error: ArchiverError) -> None:
        print(render_entry_failed(path, is_directory, error))

    def finished(self, summary: ArchiveSummary) -> None:
        for line in render_archive_summary(summary):
            print(line)
