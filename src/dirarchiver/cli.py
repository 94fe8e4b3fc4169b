"""CLI entry and startup wiring."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from . import __version__
from .archive_service import archive_profile
from .constants import APP_NAME
from .errors import ArchiverError
from .logging_setup import setup_logging
from .presenters import render_failure, render_success
from .progress import ConsoleProgressReporter


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        setup_logging(
            _expand(args.log) if args.log is not None else None,
            level=logging.DEBUG if args.verbose else logging.INFO,
        )
        archive_profile(
            profile_path=_expand(args.profile),
            output_path=_expand(args.file),
            reporter=ConsoleProgressReporter(quiet=args.quiet),
        )
    except (ArchiverError, OSError) as exc:
        logging.error("Fatal error: %s", exc, exc_info=True)
        print(render_failure(exc))
        return 1

    print(render_success())
    return 0


def _expand(raw_path: str) -> Path:
    return Path(raw_path).expanduser()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Performs archiving on directories using profiles.",
    )
    parser.add_argument(
        "-p",
        "--profile",
        required=True,
        help="Path to the JSON profile naming directories and ignore patterns.",
    )
    parser.add_argument(
        "-f",
        "--file",
        required=True,
        help="Path of the zip archive to create (overwritten if it exists).",
    )
    parser.add_argument(
        "-l",
        "--log",
        required=False,
        help="Optional path to a log file for diagnostics.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-entry details to the log file.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print a line for every compressed file.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser
