"""Optional file logging for archive runs."""

from __future__ import annotations

import logging
from pathlib import Path

from .constants import LOG_FORMAT


def setup_logging(log_file: Path | None = None, *, level: int = logging.INFO) -> None:
    """Log to ``log_file`` when given; otherwise disable logging entirely."""
    if log_file is None:
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
