"""Ignore pattern building and matching."""

from __future__ import annotations

from collections.abc import Iterable
from fnmatch import fnmatchcase
from pathlib import PurePath

from .models import IgnoreRuleSet

_NAMELESS_COMPONENTS = frozenset({"", ".", ".."})


def build_ignore_rule_set(patterns: Iterable[str]) -> IgnoreRuleSet:
    return IgnoreRuleSet(patterns_raw=tuple(patterns))


def is_ignored(path: PurePath | str, ignore_rule_set: IgnoreRuleSet) -> bool:
    """Return True when the base name of ``path`` matches any ignore pattern.

    Only the final component is tested, never the full path. Paths without a
    final component, or whose name is not valid text, are never ignored.
    """
    if not ignore_rule_set.patterns_raw:
        return False

    name = _base_name(path)
    if name is None:
        return False
    return any(
        fnmatchcase(name, _literal_brackets(pattern))
        for pattern in ignore_rule_set.patterns_raw
    )


def _literal_brackets(pattern: str) -> str:
    # Only * and ? are wildcards; a lone "]" is already literal to fnmatch.
    return pattern.replace("[", "[[]")


def _base_name(path: PurePath | str) -> str | None:
    name = PurePath(path).name
    if name in _NAMELESS_COMPONENTS:
        return None
    try:
        # Undecodable bytes survive as lone surrogates from os.fsdecode.
        name.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return name
