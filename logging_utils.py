"""Logging configuration helpers for the CLI."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Verbosity offset (verbose - quiet) -> level
_VERBOSITY_LEVELS = {
    1: logging.DEBUG,
    0: logging.INFO,
    -1: logging.WARNING,
}


def add_logging_args(parser) -> None:
    """Add --log-level, -v and -q options to an argparse parser."""
    parser.add_argument(
        "--log-level",
        choices=tuple(LOG_LEVELS),
        help="Set log verbosity explicitly",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v shows per-detection debug output)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Reduce log verbosity (-qq for errors only)",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Resolve a numeric log level; an explicit level wins over -v/-q."""
    if log_level:
        return LOG_LEVELS[log_level.lower()]
    offset = max(-2, min(1, verbose - quiet))
    return _VERBOSITY_LEVELS.get(offset, logging.ERROR)


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure root logging to stderr and return the active level."""
    level = resolve_log_level(log_level, verbose, quiet)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )
    return level
