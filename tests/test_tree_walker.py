from __future__ import annotations

import builtins
import os
import zipfile
from pathlib import Path

import pytest

import dirarchiver.tree_walker as tree_walker
from dirarchiver.archive_session import ArchiveSession
from dirarchiver.errors import (
    ArchiverError,
    CopyFailureError,
    DirectoryReadError,
    MarkEntryError,
    StripPrefixError,
)
from dirarchiver.ignore_rules import build_ignore_rule_set
from dirarchiver.tree_walker import relative_entry_path, walk_directory


class _RecordingReporter:
    def __init__(self) -> None:
        self.compressed: list[Path] = []
        self.failures: list[tuple[Path, bool, ArchiverError]] = []

    def file_compressing(self, path: Path) -> None:
        self.compressed.append(path)

    def entry_failed(self, path: Path, is_directory: bool, error: ArchiverError) -> None:
        self.failures.append((path, is_directory, error))


def _build_tree(root: Path) -> None:
    (root / "project" / "src" / "pkg").mkdir(parents=True)
    (root / "project" / "README.md").write_text("readme", encoding="utf-8")
    (root / "project" / "src" / "main.py").write_text("print('hi')", encoding="utf-8")
    (root / "project" / "src" / "pkg" / "mod.py").write_text("x = 1", encoding="utf-8")
    (root / "project" / "empty").mkdir()


def _walk(
    tmp_path: Path,
    directory: Path,
    patterns: list[str] | None = None,
    reporter: _RecordingReporter | None = None,
) -> tuple[list[str], tree_walker.WalkStats]:
    output_path = tmp_path / "out.zip"
    with ArchiveSession.open(output_path) as session:
        stats = walk_directory(
            session,
            build_ignore_rule_set(patterns or []),
            tmp_path / "source",
            directory,
            reporter=reporter,
        )
        session.finish("test")

    with zipfile.ZipFile(output_path) as zf:
        return zf.namelist(), stats


def test_walk_writes_directories_before_their_children(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _build_tree(source)

    names, stats = _walk(tmp_path, source / "project")

    assert names == [
        "project/",
        "project/README.md",
        "project/empty/",
        "project/src/",
        "project/src/main.py",
        "project/src/pkg/",
        "project/src/pkg/mod.py",
    ]
    assert stats.directory_entries == 4
    assert stats.file_entries == 3
    assert stats.failures == 0


def test_walk_prunes_ignored_directories_entirely(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _build_tree(source)

    names, _ = _walk(tmp_path, source / "project", patterns=["src"])

    assert not any(name.startswith("project/src") for name in names)
    assert "project/README.md" in names


def test_walk_of_ignored_top_directory_writes_nothing(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _build_tree(source)

    names, stats = _walk(tmp_path, source / "project", patterns=["proj*"])

    assert names == []
    assert stats.directory_entries == 0


def test_walk_skips_ignored_files(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _build_tree(source)
    (source / "project" / "scratch.tmp").write_text("tmp", encoding="utf-8")

    names, _ = _walk(tmp_path, source / "project", patterns=["*.tmp"])

    assert "project/scratch.tmp" not in names


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_walk_skips_symlinks(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _build_tree(source)
    try:
        (source / "project" / "link-to-src").symlink_to(source / "project" / "src")
        (source / "project" / "link.md").symlink_to(source / "project" / "README.md")
    except OSError:
        pytest.skip("symlink creation not permitted")

    names, _ = _walk(tmp_path, source / "project")

    assert not any("link" in name for name in names)


def test_walk_continues_after_unreadable_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    source = tmp_path / "source"
    _build_tree(source)
    unreadable = source / "project" / "src" / "main.py"

    def _open(file, *args, **kwargs):
        if Path(file) == unreadable:
            raise PermissionError(13, "Permission denied", str(file))
        return builtins.open(file, *args, **kwargs)

    monkeypatch.setattr(tree_walker, "open", _open, raising=False)
    reporter = _RecordingReporter()

    names, stats = _walk(tmp_path, source / "project", reporter=reporter)

    assert "project/src/main.py" not in names
    assert "project/src/" in names
    assert "project/src/pkg/mod.py" in names
    assert stats.failures == 1
    [(failed_path, is_directory, error)] = reporter.failures
    assert failed_path == unreadable
    assert is_directory is False
    assert str(error).startswith("failed to read file [")


def test_walk_continues_after_unlistable_sub_directory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    source = tmp_path / "source"
    _build_tree(source)
    unlistable = source / "project" / "src"
    real_scandir = os.scandir

    def _scandir(path):
        if Path(path) == unlistable:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(tree_walker.os, "scandir", _scandir)
    reporter = _RecordingReporter()

    names, stats = _walk(tmp_path, source / "project", reporter=reporter)

    assert names == ["project/", "project/README.md", "project/empty/"]
    assert stats.failures == 1
    assert isinstance(reporter.failures[0][2], DirectoryReadError)
    assert reporter.failures[0][1] is True


def test_walk_raises_when_top_directory_cannot_be_listed(tmp_path: Path) -> None:
    with ArchiveSession.open(tmp_path / "out.zip") as session:
        with pytest.raises(DirectoryReadError):
            walk_directory(
                session,
                build_ignore_rule_set([]),
                tmp_path,
                tmp_path / "does-not-exist",
            )


def test_walk_reports_each_compressed_file(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _build_tree(source)
    reporter = _RecordingReporter()

    _walk(tmp_path, source / "project", reporter=reporter)

    assert [path.name for path in reporter.compressed] == ["README.md", "main.py", "mod.py"]


def test_walk_of_common_root_itself_has_no_named_entry(tmp_path: Path) -> None:
    source = tmp_path / "source"
    _build_tree(source)

    names, _ = _walk(tmp_path, source)

    assert names[0] == "project/"
    assert "/" not in names and "" not in names


def test_relative_entry_path_uses_forward_slashes(tmp_path: Path) -> None:
    relative = relative_entry_path(tmp_path / "a" / "b" / "c.txt", tmp_path)

    assert relative.as_posix() == "a/b/c.txt"


def test_relative_entry_path_rejects_paths_outside_the_root(tmp_path: Path) -> None:
    with pytest.raises(StripPrefixError):
        relative_entry_path(Path("/elsewhere/file.txt"), tmp_path)


def test_walk_silently_skips_entries_that_cannot_be_inspected(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    source = tmp_path / "source"
    _build_tree(source)
    real_scandir = os.scandir

    class _UninspectableEntry:
        def __init__(self, entry: os.DirEntry) -> None:
            self.name = entry.name
            self.path = entry.path

        def is_dir(self, *, follow_symlinks: bool = True) -> bool:
            raise PermissionError(13, "Permission denied", self.path)

        def is_file(self, *, follow_symlinks: bool = True) -> bool:
            raise PermissionError(13, "Permission denied", self.path)

    class _Listing:
        def __init__(self, path) -> None:
            self._inner = real_scandir(path)

        def __enter__(self):
            return self

        def __exit__(self, *exc_info) -> None:
            self._inner.close()

        def __iter__(self):
            for entry in self._inner:
                if entry.name == "README.md":
                    yield _UninspectableEntry(entry)
                else:
                    yield entry

    monkeypatch.setattr(tree_walker.os, "scandir", _Listing)
    reporter = _RecordingReporter()

    names, stats = _walk(tmp_path, source / "project", reporter=reporter)

    assert "project/README.md" not in names
    assert "project/src/main.py" in names
    assert stats.file_entries == 2
    assert stats.failures == 0
    assert reporter.failures == []


def test_walk_keeps_siblings_when_one_entry_cannot_be_written(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    source = tmp_path / "source"
    _build_tree(source)
    real_add_file = ArchiveSession.add_file

    def _add_file(self, relative_path, timestamp, source_file, **kwargs):
        if relative_path.name == "main.py":
            raise CopyFailureError("stream interrupted")
        if relative_path.name == "README.md":
            raise MarkEntryError("entry rejected")
        return real_add_file(self, relative_path, timestamp, source_file, **kwargs)

    monkeypatch.setattr(ArchiveSession, "add_file", _add_file)
    reporter = _RecordingReporter()

    names, stats = _walk(tmp_path, source / "project", reporter=reporter)

    assert names == [
        "project/",
        "project/empty/",
        "project/src/",
        "project/src/pkg/",
        "project/src/pkg/mod.py",
    ]
    assert stats.file_entries == 1
    assert stats.failures == 2
    assert [type(error) for _, _, error in reporter.failures] == [
        MarkEntryError,
        CopyFailureError,
    ]
