"""Logging setup for the ``flute_core`` namespace.

``FLUTE_LOG_LEVEL`` and ``FLUTE_LOG_FILE`` are consulted when the caller does
not pass an explicit level or file. Repeated calls replace the handlers
installed by a previous call instead of stacking duplicates.
"""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "flute_core"
LOG_LEVEL_ENV = "FLUTE_LOG_LEVEL"
LOG_FILE_ENV = "FLUTE_LOG_FILE"
_HANDLER_TAG = "_flute_core_handler"

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: int | str | None) -> int:
    """Turn ``level`` (or ``$FLUTE_LOG_LEVEL``) into a numeric logging level."""

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: int | str | None = None, log_file: str | None = None) -> logging.Logger:
    """Attach a console handler (and optionally a file handler) to the package logger."""

    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = resolve_level(level)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt="%H:%M:%S")
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    log_file = log_file or os.environ.get(LOG_FILE_ENV)
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    logger.debug("Logging initialised at %s", logging.getLevelName(numeric_level))
    return logger


__all__ = ["LOGGER_NAME", "resolve_level", "setup_logging"]
