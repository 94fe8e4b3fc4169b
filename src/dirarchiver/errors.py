"""Typed exceptions for dirarchiver."""

from __future__ import annotations


class ArchiverError(Exception):
    """Base exception for dirarchiver failures.

    ``category`` is the short label shown to users; the wrapped cause, when
    there is one, is rendered in brackets after it.
    """

    category = "failed to archive"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.category)
        self.detail = detail

    def __str__(self) -> str:
        if self.detail is None:
            return self.category
        return f"{self.category} [{self.detail}]"


class ProfileLoadError(ArchiverError):
    """Raised when the profile cannot be read or does not have the expected shape."""

    category = "failed to load profile"


class ArchiveCreateError(ArchiverError):
    """Raised when the output archive file cannot be created."""

    category = "failed to create archive file"


class DirectoryReadError(ArchiverError):
    """Raised when a directory cannot be listed."""

    category = "failed to read directory"


class FileReadError(ArchiverError):
    """Raised when a file cannot be opened for its contents."""

    category = "failed to read file"


class CopyFailureError(ArchiverError):
    """Raised when streaming file contents into the archive fails."""

    category = "failed to copy file to archive"


class MarkEntryError(ArchiverError):
    """Raised when the archive rejects a new entry."""

    category = "failed to mark entry in archive"


class FinishArchiveError(ArchiverError):
    """Raised when the archive cannot be finalized."""

    category = "failed to finish archive"


class StripPrefixError(ArchiverError):
    """Raised when an entry path is not under the common root."""

    category = "failed to strip prefix"


class CommonRootNotFoundError(ArchiverError):
    """Raised when the configured directories share no ancestor."""

    category = "failed to determine shared parent path"


class ArchiveClosedError(ArchiverError):
    """Raised when an archive session is used after it was finished."""

    category = "archive session already finished"
