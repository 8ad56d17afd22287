"""
logger_setup.py - Logging Configuration

Console handler on stderr (WARNING, or DEBUG when verbose) and an optional
rotating log file that records everything from INFO up.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "migration_sorter"


def configure_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3
) -> logging.Logger:
    """
    Configure the package logger

    Args:
        verbose: Log DEBUG and up to the console
        log_file: Optional file for a rotating log
        max_bytes: Max size in bytes for the rotating file
        backup_count: Number of rotated files to keep

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Accept all logs; handlers will filter

    # Reconfiguring replaces the handlers installed by a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)

    return logger
