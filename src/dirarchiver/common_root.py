"""Shared ancestor resolution for configured directories."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import PurePath

from .errors import CommonRootNotFoundError


def resolve_common_root(directories: Sequence[PurePath]) -> PurePath:
    """Return the deepest path that every directory equals or lies under.

    Candidates are the first directory and then its parents, most specific
    first. A bare anchor such as ``/`` or ``C:\\`` only qualifies when it is
    itself one of the directories, so unrelated trees fail instead of being
    named from the filesystem root.
    """
    if not directories:
        raise CommonRootNotFoundError("no directories configured")

    first = directories[0]
    for candidate in (first, *first.parents):
        if _is_bare_anchor(candidate) and candidate not in directories:
            continue
        if all(_is_within(directory, candidate) for directory in directories):
            return candidate

    raise CommonRootNotFoundError(
        "directories share no common ancestor: "
        + ", ".join(str(directory) for directory in directories)
    )


def _is_bare_anchor(path: PurePath) -> bool:
    return path.anchor != "" and path == type(path)(path.anchor)


def _is_within(path: PurePath, ancestor: PurePath) -> bool:
    try:
        path.relative_to(ancestor)
    except ValueError:
        return False
    return True
