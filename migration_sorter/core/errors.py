"""
errors.py - Exception Types

DirectoryNotFound is fatal to a run. RegenerationError and its subclasses abort the
remaining regeneration steps and carry enough context (step, path, backup directory,
completed operations) for a manual restore from the backup.
"""

from pathlib import Path
from typing import List, Optional

from .models_fs import RenameOp


class SorterError(Exception):
    """Base class for migration sorter errors"""


class DirectoryNotFound(SorterError, ValueError):
    """Migrations directory does not exist"""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Directory not found: {self.path}")


class DirectoryUnreadable(SorterError):
    """Migrations directory exists but cannot be listed"""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read directory {self.path}: {reason}")


class RegenerationError(SorterError):
    """Regeneration aborted part way"""

    step = "regenerate"

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        backup_dir: Optional[Path] = None,
        completed: Optional[List[RenameOp]] = None,
        step: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.backup_dir = backup_dir
        self.completed: List[RenameOp] = list(completed or [])
        if step:
            self.step = step

    def report(self) -> str:
        """Multi-line description for the user"""
        lines = [f"Failed to regenerate migration files ({self.step}): {self.message}"]
        if self.path is not None:
            lines.append(f"  File: {self.path}")
        if self.completed:
            lines.append(f"  Already renamed: {len(self.completed)}")
        if self.backup_dir is not None:
            lines.append(f"  Backup of original files: {self.backup_dir}")
            lines.append("Please check the backup directory and restore manually if needed.")
        return "\n".join(lines)


class PlanValidationError(RegenerationError):
    """Plan rejected before anything was written"""

    step = "validate"

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class BackupWriteFailure(RegenerationError):
    """Copying an original into the backup directory failed"""

    step = "backup"


class RenameFailure(RegenerationError):
    """Reading, deleting or writing a migration file failed"""

    step = "rename"
