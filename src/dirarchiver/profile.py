"""Profile loading, validation, and directory path mapping."""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from pathlib import Path
from typing import Any

from .constants import PROFILE_DIRECTORIES_KEY, PROFILE_DIRECTORIES_LEGACY_KEY
from .errors import ProfileLoadError
from .models import Profile

logger = logging.getLogger(__name__)

_WINDOWS_DRIVE_RELATIVE_RE = re.compile(r"^[A-Za-z]:[^/\\]")


def load_profile(profile_path: Path) -> Profile:
    """Read and validate the JSON profile at ``profile_path``.

    Relative directory entries resolve against the profile file's directory.
    """
    try:
        raw_text = profile_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ProfileLoadError(f"failed to read file [{exc}]") from exc

    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise ProfileLoadError(f"failed to deserialise value [{exc}]") from exc

    profile = parse_profile(payload, profile_dir=profile_path.resolve().parent)
    logger.info(
        "Loaded profile %r from %s (%d directories, %d ignores)",
        profile.name,
        profile_path,
        len(profile.directories),
        len(profile.ignores),
    )
    return profile


def parse_profile(payload: Any, *, profile_dir: Path) -> Profile:
    if not isinstance(payload, dict):
        raise ProfileLoadError("profile must be a JSON object")

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ProfileLoadError("'name' must be a non-empty string")

    directories_key = (
        PROFILE_DIRECTORIES_LEGACY_KEY
        if PROFILE_DIRECTORIES_KEY not in payload
        and PROFILE_DIRECTORIES_LEGACY_KEY in payload
        else PROFILE_DIRECTORIES_KEY
    )
    directories_raw = _get_str_list(payload, directories_key, required=True)
    if not directories_raw:
        raise ProfileLoadError(f"'{directories_key}' must list at least one directory")

    ignores = _get_str_list(payload, "ignores", required=False)

    return Profile(
        name=name,
        directories=tuple(
            map_directory(raw_path, profile_dir=profile_dir)
            for raw_path in directories_raw
        ),
        ignores=tuple(ignores),
    )


def map_directory(raw_path: str, *, profile_dir: Path) -> Path:
    """Map a profile directory string to an absolute path.

    ~ or ~/...  -> user home directory
    Absolute    -> used as-is
    Relative    -> resolved against profile_dir
    """
    normalized = unicodedata.normalize("NFC", raw_path)
    if normalized == "":
        raise ProfileLoadError("directory paths must not be empty")
    if "\0" in normalized:
        raise ProfileLoadError(f"directory path contains NUL (\\0): {raw_path!r}")
    if _is_windows_rooted_not_fully_qualified(normalized):
        raise ProfileLoadError(
            f"Windows rooted path must be fully qualified: {raw_path}"
        )

    candidate = Path(normalized)
    if normalized.startswith("~"):
        try:
            candidate = candidate.expanduser()
        except RuntimeError as exc:
            raise ProfileLoadError(
                f"failed to expand user home in path: {raw_path}"
            ) from exc

    if not candidate.is_absolute():
        candidate = profile_dir / candidate
    return candidate.resolve(strict=False)


def _get_str_list(payload: dict[str, Any], key: str, *, required: bool) -> list[str]:
    if key not in payload:
        if required:
            raise ProfileLoadError(f"profile is missing '{key}'")
        return []

    value = payload[key]
    if not isinstance(value, list):
        raise ProfileLoadError(f"'{key}' must be a list")
    if not all(isinstance(item, str) for item in value):
        raise ProfileLoadError(f"'{key}' must be a list of strings")
    return value


def _is_windows_rooted_not_fully_qualified(path_text: str) -> bool:
    if path_text.startswith("\\") and not path_text.startswith("\\\\"):
        return True
    return _WINDOWS_DRIVE_RELATIVE_RE.match(path_text) is not None
