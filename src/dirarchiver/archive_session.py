"""Append-only zip output with fixed compression settings."""

from __future__ import annotations

import logging
import shutil
import stat
import zipfile
from pathlib import Path, PurePosixPath
from types import TracebackType
from typing import BinaryIO

from .constants import COMPRESSION_LEVEL, COMPRESSION_METHOD
from .errors import (
    ArchiveClosedError,
    ArchiveCreateError,
    CopyFailureError,
    FinishArchiveError,
    MarkEntryError,
)
from .models import ArchiveEntry, EntryKind, ZipDateTime

logger = logging.getLogger(__name__)

_DIRECTORY_EXTERNAL_ATTR = ((stat.S_IFDIR | 0o755) << 16) | 0x10
_FILE_EXTERNAL_ATTR = (stat.S_IFREG | 0o644) << 16


class ArchiveSession:
    """Owns the open output archive until ``finish`` is called.

    Every entry is bzip2-compressed at level 9. Entries are appended in the
    order they are added and each name may be written only once.
    """

    def __init__(self, output_path: Path, zip_file: zipfile.ZipFile) -> None:
        self.output_path = output_path
        self._zip_file = zip_file
        self._entry_names: set[str] = set()
        self._entries: list[ArchiveEntry] = []
        self._finished = False

    @classmethod
    def open(cls, output_path: Path) -> ArchiveSession:
        try:
            zip_file = zipfile.ZipFile(
                output_path,
                mode="w",
                compression=COMPRESSION_METHOD,
                compresslevel=COMPRESSION_LEVEL,
            )
        except OSError as exc:
            raise ArchiveCreateError(str(exc)) from exc

        logger.info("Opened archive %s", output_path)
        return cls(output_path, zip_file)

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def entries(self) -> list[ArchiveEntry]:
        return list(self._entries)

    def add_directory(self, relative_path: PurePosixPath, timestamp: ZipDateTime) -> ArchiveEntry:
        entry = ArchiveEntry(
            relative_path=relative_path,
            kind=EntryKind.DIRECTORY,
            timestamp=timestamp,
        )
        zip_info = self._prepare(entry)
        zip_info.external_attr = _DIRECTORY_EXTERNAL_ATTR
        try:
            self._zip_file.writestr(zip_info, b"")
        except (OSError, ValueError, zipfile.BadZipFile) as exc:
            raise MarkEntryError(str(exc)) from exc

        self._record(entry)
        return entry

    def add_file(
        self,
        relative_path: PurePosixPath,
        timestamp: ZipDateTime,
        source: BinaryIO,
        *,
        size: int = 0,
    ) -> ArchiveEntry:
        """Stream ``source`` into a new file entry.

        ``size`` is the expected length; zip64 headers are chosen from it up
        front, so large files must pass it.

        A failure after the entry was opened leaves a truncated entry behind;
        its name still counts as written.
        """
        entry = ArchiveEntry(
            relative_path=relative_path,
            kind=EntryKind.FILE,
            timestamp=timestamp,
        )
        zip_info = self._prepare(entry)
        zip_info.external_attr = _FILE_EXTERNAL_ATTR
        zip_info.file_size = size
        try:
            destination = self._zip_file.open(zip_info, mode="w")
        except (OSError, ValueError, RuntimeError, zipfile.BadZipFile) as exc:
            raise MarkEntryError(str(exc)) from exc

        self._record(entry)
        try:
            with destination:
                shutil.copyfileobj(source, destination)
        except (OSError, RuntimeError) as exc:
            raise CopyFailureError(str(exc)) from exc

        return entry

    def finish(self, comment: str) -> None:
        self._ensure_open()
        self._finished = True
        try:
            self._zip_file.comment = comment.encode("utf-8")
            self._zip_file.close()
        except OSError as exc:
            raise FinishArchiveError(str(exc)) from exc

        logger.info(
            "Finished archive %s with %d entries",
            self.output_path,
            len(self._entries),
        )

    def close(self) -> None:
        """Close the output without a comment if ``finish`` was never reached."""
        if self._finished:
            return
        self._finished = True
        try:
            self._zip_file.close()
        except OSError:
            logger.warning("Failed to close unfinished archive %s", self.output_path, exc_info=True)

    def __enter__(self) -> ArchiveSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _prepare(self, entry: ArchiveEntry) -> zipfile.ZipInfo:
        self._ensure_open()
        entry_name = entry.entry_name
        if entry_name in self._entry_names:
            raise MarkEntryError(f"duplicate entry name: {entry_name}")

        try:
            zip_info = zipfile.ZipInfo(entry_name, date_time=entry.timestamp)
        except ValueError as exc:
            raise MarkEntryError(str(exc)) from exc
        zip_info.compress_type = COMPRESSION_METHOD
        # Aliased by ZipInfo.compress_level on 3.13+; the only spelling 3.10-3.12 accept.
        zip_info._compresslevel = COMPRESSION_LEVEL
        return zip_info

    def _record(self, entry: ArchiveEntry) -> None:
        self._entry_names.add(entry.entry_name)
        self._entries.append(entry)

    def _ensure_open(self) -> None:
        if self._finished:
            raise ArchiveClosedError()
