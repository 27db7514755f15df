"""Logging setup for the heic2jpeg command.

Every module logs through a child of the ``heic2jpeg`` logger. The command
configures it once: progress and results go to stdout, and ``--log-file``
adds a timestamped copy of the same records on disk.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

PACKAGE_LOGGER = "heic2jpeg"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_CONSOLE_FORMAT = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Configure the package logger for a command run.

    Calling this again replaces the handlers from the previous call.

    Args:
        verbose: Log DEBUG records and show where each record came from
        log_file: Optional file that also receives every record (appended, UTF-8)

    Returns:
        The ``heic2jpeg`` logger
    """
    level = logging.DEBUG if verbose else logging.INFO

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        logging.Formatter(VERBOSE_CONSOLE_FORMAT if verbose else CONSOLE_FORMAT)
    )
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            # Conversions still run with console logging only
            logger.warning(f"Cannot write log file {log_file}: {e}")
        else:
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
            logger.addHandler(file_handler)
            logger.debug(f"Logging to file: {log_file}")

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``heic2jpeg`` namespace for name."""
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"

    return logging.getLogger(name)
