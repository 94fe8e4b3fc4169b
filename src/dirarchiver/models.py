"""Dataclasses shared across dirarchiver layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath

ZipDateTime = tuple[int, int, int, int, int, int]


@dataclass(frozen=True)
class Profile:
    name: str
    directories: tuple[Path, ...]
    ignores: tuple[str, ...]


@dataclass(frozen=True)
class IgnoreRuleSet:
    patterns_raw: tuple[str, ...]


class EntryKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class ArchiveEntry:
    relative_path: PurePosixPath
    kind: EntryKind
    timestamp: ZipDateTime

    @property
    def entry_name(self) -> str:
        name = self.relative_path.as_posix()
        if self.kind is EntryKind.DIRECTORY:
            return f"{name.rstrip('/')}/"
        return name


@dataclass
class WalkStats:
    directory_entries: int = 0
    file_entries: int = 0
    failures: int = 0


@dataclass(frozen=True)
class ArchiveSummary:
    output_path: Path
    profile_name: str
    common_root: Path
    directory_entry_count: int
    file_entry_count: int
    failure_count: int
    elapsed_seconds: float
