"""Pytest configuration and fixtures for dirarchiver tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _restore_logging():
    """cli.main reconfigures global logging; undo that per test."""
    yield
    logging.disable(logging.NOTSET)
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def write_profile(tmp_path: Path):
    """Return a helper that writes a JSON profile and returns its path."""

    def _write(payload: object, name: str = "profile.json") -> Path:
        profile_path = tmp_path / name
        profile_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return profile_path

    return _write


@pytest.fixture
def scenario_tree(tmp_path: Path) -> Path:
    """Create data/a (keep.txt, skip.tmp) and an empty data/b."""
    data_dir = tmp_path / "data"
    (data_dir / "a").mkdir(parents=True)
    (data_dir / "b").mkdir()
    (data_dir / "a" / "keep.txt").write_text("keep", encoding="utf-8")
    (data_dir / "a" / "skip.tmp").write_text("skip", encoding="utf-8")
    return data_dir
