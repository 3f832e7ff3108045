"""Structured logging configuration for symcalc.

Every module logs through ``get_logger(<module>)``, a child of the ``symcalc``
logger. Nothing is printed until ``setup_logging`` attaches handlers; the CLI
does so on start-up, library users may call it or configure ``symcalc``
themselves.
"""

import logging
import sys
from datetime import datetime
from typing import Optional, TextIO

from .config import LOG_LEVEL

ROOT_LOGGER_NAME = "symcalc"


class StructuredFormatter(logging.Formatter):
    """Formats records as ``<iso timestamp> [LEVEL] logger: message`` plus any traceback."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        message = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return value


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Attach structured handlers to the ``symcalc`` logger.

    Calling it again replaces (and closes) the handlers of the previous call.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: SYMCALC_LOG_LEVEL)
        log_file: Optional file path that receives the same records
        stream: Console stream (default: sys.stderr)

    Returns:
        The configured ``symcalc`` logger

    Raises:
        ValueError: If level is not a logging level name
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(_resolve_level(level or LOG_LEVEL))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``symcalc.<name>`` logger of a module."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
