"""Logging setup for chatterbox.

Chatterbox is usually embedded in a host application, so
:func:`setup_logging` configures the ``chatterbox`` package logger only and
leaves the root logger to the host.  Records still propagate upwards.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

PACKAGE_LOGGER = "chatterbox"

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_HANDLER_ATTR = "_chatterbox_log_handler"


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level

    numeric_level = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")
    return numeric_level


def _package_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_ATTR, False):
            return handler
    return None


def setup_logging(level: str | int = "INFO", stream: IO[str] | None = None) -> logging.Logger:
    """Route ``chatterbox.*`` records to *stream* (``stderr`` by default).

    A second call adjusts the level of the existing handler (and points it
    at *stream* when one is given) instead of adding another.

    Args:
        level: Level name such as ``"debug"`` or a numeric level.
        stream: Text stream for the handler.

    Returns:
        The configured package logger.

    Raises:
        ValueError: If *level* is not a recognised level name.
    """
    numeric_level = _resolve_level(level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)

    handler = _package_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        setattr(handler, _HANDLER_ATTR, True)
        logger.addHandler(handler)
    elif stream is not None and isinstance(handler, logging.StreamHandler):
        handler.setStream(stream)

    handler.setLevel(numeric_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for *name*, typically the caller's ``__name__``."""
    return logging.getLogger(name)
