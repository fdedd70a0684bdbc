"""
Logging configuration for the clientgen pipeline.

Usage in generator modules:
    from clientgen.gen_logging import get_logger
    logger = get_logger(__name__)

The root logger name is "clientgen". Log levels are controlled by the CLI.
Generated code goes to stdout, so log records always go to stderr.
"""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "clientgen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger under the clientgen hierarchy.

    "clientgen.context_builder" and "context_builder" both map to
    "clientgen.context_builder".
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the clientgen logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG   (one line per definition and operation)
        (default)       -> INFO    (summary lines)
        --quiet / -q    -> WARNING (warnings and errors only)
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Avoid duplicate handlers when called multiple times
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_MessageFormatter())
    root_logger.addHandler(handler)
    root_logger.propagate = False


class _MessageFormatter(logging.Formatter):
    """Emit the message as-is."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()
