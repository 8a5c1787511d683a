"""Logging setup for WGS Inspector.

Everything logs under the ``wgs_inspector`` logger. Records always go to a
log file next to the configuration; ``--debug`` also echoes them to stdout.
Parsers log at DEBUG (header problems, out-of-range timestamps, duplicate
GUIDs dropped by the index scan) and WARNING (truncated or corrupt file
tables), so the log file is the place to look when a scan looks wrong.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config.paths import WgsPaths

APP_LOGGER = "wgs_inspector"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(handler: logging.Handler, fmt: str, datefmt: Optional[str] = None) -> logging.Handler:
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def setup_logging(debug: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure the application logger.

    Safe to call again: existing handlers are closed and replaced.

    Args:
        debug: Also log to stdout
        log_file: Log file location, defaults to ``WgsPaths.LOG_FILE``

    Returns:
        The ``wgs_inspector`` logger
    """
    log_file = log_file or WgsPaths.LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(logging.DEBUG)
    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)

    logger.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), FILE_FORMAT, DATE_FORMAT))
    if debug:
        logger.addHandler(_handler(logging.StreamHandler(sys.stdout), CONSOLE_FORMAT))

    logger.debug("Logging to %s (debug=%s)", log_file, debug)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger for one module, e.g. ``get_logger("index_parser")``."""
    return logging.getLogger(f"{APP_LOGGER}.{name}")
