"""User-facing text rendering."""

from __future__ import annotations

from pathlib import Path

from .constants import FAILURE_MESSAGE_TEMPLATE, SUCCESS_MESSAGE
from .errors import ArchiverError
from .models import ArchiveSummary


def render_loading_profile(profile_path: Path) -> str:
    return f"Loading profile from path <{profile_path}>..."


def render_creating_archive(profile_name: str) -> str:
    return f"Creating archive using profile '{profile_name}'..."


def render_archiving_count(directory_count: int) -> str:
    noun = "directory" if directory_count == 1 else "directories"
    return f"Archiving {directory_count} {noun}..."


def render_directory_started(directory: Path) -> str:
    return f"Archiving directory <{directory}>..."


def render_file_compressing(path: Path) -> str:
    return f"Compressing file <{path}>..."


def render_directory_failed(directory: Path, error: ArchiverError) -> str:
    return f"Failed to archive directory <{directory}>: {error}."


def render_entry_failed(path: Path, is_directory: bool, error: ArchiverError) -> str:
    kind = "sub-directory" if is_directory else "sub-file"
    return f"Failed to compress {kind} <{path}>: {error}."


def render_archive_summary(summary: ArchiveSummary) -> list[str]:
    lines = [
        f"Created and finished archive in {summary.elapsed_seconds:.3f}s.",
        f"Output: {summary.output_path}",
        f"Common root: {summary.common_root}",
        (
            f"Entries: {summary.directory_entry_count:,} directories | "
            f"{summary.file_entry_count:,} files"
        ),
    ]
    if summary.failure_count:
        lines.append(f"Skipped after failures: {summary.failure_count:,}")
    return lines


def render_success() -> str:
    return SUCCESS_MESSAGE


def render_failure(error: Exception) -> str:
    return FAILURE_MESSAGE_TEMPLATE.format(cause=error)
