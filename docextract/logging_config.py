"""
Logging setup for docextract.

Every module logs through a child of the ``docextract`` logger, so an
application can silence or redirect the whole package in one place.
Open/close are logged at INFO, per-call work at DEBUG and MuPDF failures
at WARNING.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

ROOT_LOGGER = "docextract"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Calling it again replaces the handlers from the previous call instead
    of adding more.

    Args:
        level: Level for the logger and its handlers
        log_file: Also write records to this file (UTF-8)
        format_string: Record format, DEFAULT_FORMAT if omitted
        stream: Console stream, stdout if omitted

    Returns:
        The ``docextract`` logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, placed under the ``docextract`` logger."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
