"""
Shared fixtures for the migration sorter test suite.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Union

import pytest

# GUI tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from migration_sorter.core.logger_setup import LOGGER_NAME
from mocks import FixedClock


@pytest.fixture
def make_migrations(tmp_path):
    """
    Create a migrations directory.

    Accepts {name: content} or {name: (content, mtime)} and returns the directory.
    Files are created in the given order with increasing mtimes unless given.
    """
    def _make(files: Dict[str, Union[str, tuple]], directory: Optional[Path] = None) -> Path:
        directory = directory or tmp_path / "database" / "migrations"
        directory.mkdir(parents=True, exist_ok=True)
        base = 1_700_000_000
        for i, (name, value) in enumerate(files.items()):
            if isinstance(value, tuple):
                content, mtime = value
            else:
                content, mtime = value, base + i * 60
            path = directory / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            os.utime(path, (mtime, mtime))
        return directory
    return _make


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 3, 4, 10, 20, 30, 123456))


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by configure_logging so they never outlive a test's captured streams"""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
