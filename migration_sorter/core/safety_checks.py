"""
safety_checks.py - Safety Check Module

Provides checks run before migration files are backed up and rewritten
"""

from pathlib import Path
from typing import Tuple, Optional, List
import os


def is_valid_filename(name: str) -> Tuple[bool, Optional[str]]:
    """
    Check if filename is valid (mainly for Windows)

    Args:
        name: Filename

    Returns:
        (is_valid, error_reason)
    """
    if not name:
        return False, "Filename cannot be empty"

    # Windows invalid characters
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        if char in name:
            return False, f"Filename contains invalid character: {char}"

    # Trailing space or dot
    if name.endswith(' ') or name.endswith('.'):
        return False, "Filename cannot end with space or dot"

    if len(name) > 255:
        return False, "Filename exceeds 255 characters"

    return True, None


def check_writable(path: Path) -> Tuple[bool, Optional[str]]:
    """
    Check if path is writable

    Args:
        path: Path to check

    Returns:
        (is_writable, error_reason)
    """
    if path.exists():
        if not os.access(path, os.W_OK):
            return False, f"Not writable: {path}"
    else:
        # Walk up to the first existing parent (backup root may not exist yet)
        parent = path.parent
        while not parent.exists() and parent != parent.parent:
            parent = parent.parent
        if not os.access(parent, os.W_OK):
            return False, f"Directory is not writable: {parent}"

    return True, None


def check_directories(directories: List[Path]) -> List[str]:
    """
    Check that every directory that will be written to is writable

    Args:
        directories: Directories holding migration files, plus the backup root

    Returns:
        Error list
    """
    errors = []
    for directory in dict.fromkeys(Path(d) for d in directories):
        valid, error = check_writable(directory)
        if not valid:
            errors.append(error)
    return errors
