"""Logging helpers.

The client speaks in its own level vocabulary (SUCCESS, FAIL, PANIC, ...)
which is mapped onto standard ``logging`` levels here.
"""

from __future__ import annotations

import enum
import logging
import sys

CONSOLE_LOGGER_NAME = "gloria.console"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"


class LogLevel(str, enum.Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"
    PANIC = "PANIC"
    INFO = "INFO"
    WARN = "WARN"
    DEBUG = "DEBUG"

    @property
    def logging_level(self) -> int:
        return _LEVELS[self]


_LEVELS = {
    LogLevel.SUCCESS: logging.INFO,
    LogLevel.FAIL: logging.WARNING,
    LogLevel.PANIC: logging.ERROR,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.DEBUG: logging.DEBUG,
}


def console_logger() -> logging.Logger:
    """Return the stdout console logger, attaching its handler once."""
    logger = logging.getLogger(CONSOLE_LOGGER_NAME)
    if not any(
        getattr(handler, "_gloria_console", False)
        for handler in logger.handlers
    ):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler._gloria_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    return logger


def log_event(
    logger: logging.Logger,
    level: LogLevel,
    location: str,
    message: str,
) -> None:
    logger.log(
        level.logging_level, "| %s | [%s] %s", location, level.value, message
    )
