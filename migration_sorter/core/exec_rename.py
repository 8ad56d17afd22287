"""
exec_rename.py - Regeneration Execution Module

Responsibilities:
- Confirmation, backup and rename phases of the final regeneration
- Backup manifest for manual recovery
- dry_run support

Phases: IDLE -> CONFIRM_PENDING -> BACKING_UP -> RENAMING -> DONE, or
CONFIRM_PENDING -> CANCELLED when the user declines (nothing is touched).
Renaming is read / delete / write per file and is not atomic: a failure stops
the loop, leaves already renamed files renamed and points at the backup.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .errors import BackupWriteFailure, PlanValidationError, RenameFailure
from .models_fs import FileEntry, RegenerationPlan, RenameOp
from .plan_rename import plan_regeneration, validate_plan, TIMESTAMP_FORMAT
from .ports import Clock, FileSystem, LocalFileSystem, SystemClock, UserPrompt
from .safety_checks import check_directories

logger = logging.getLogger(__name__)

CONFIRM_QUESTION = "Do you want to regenerate the migration files with updated timestamps?"
BACKUP_DIR_FORMAT = "%Y-%m-%d_%H-%M-%S"
MANIFEST_NAME = "manifest.json"

ProgressCallback = Callable[[int, int, str], None]


class RegenerationPhase(Enum):
    IDLE = "idle"
    CONFIRM_PENDING = "confirm_pending"
    BACKING_UP = "backing_up"
    RENAMING = "renaming"
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class RegenerationResult:
    """Regeneration execution result"""
    plan: Optional[RegenerationPlan] = None
    backup_dir: Optional[Path] = None
    renamed: List[RenameOp] = field(default_factory=list)
    cancelled: bool = False
    dry_run: bool = False

    @property
    def success_count(self) -> int:
        return len(self.renamed)

    def summary(self) -> str:
        """Generate summary"""
        if self.cancelled:
            return "Migration regeneration cancelled."
        if self.dry_run:
            lines = ["[Preview mode] Will not actually execute", ""]
            if self.plan:
                for op in self.plan.ops:
                    lines.append(f"  {op.src.name:<50} -> {op.dst.name}")
            return "\n".join(lines)
        lines = [
            "Migration files successfully regenerated with new order!",
            f"Backup of original files saved to: {self.backup_dir}",
            f"{self.success_count} files processed successfully",
        ]
        return "\n".join(lines)


class AlwaysConfirm:
    """UserPrompt that answers yes without asking"""

    def confirm(self, question: str) -> bool:
        return True


def create_backup_directory(backup_root: Path, now: datetime, fs: FileSystem) -> Path:
    """
    Create a fresh directory named after the current time

    An existing directory with the same name gets _1, _2, ... appended.
    """
    name = now.strftime(BACKUP_DIR_FORMAT)
    candidate = Path(backup_root) / name

    n = 1
    while fs.exists(candidate):
        candidate = Path(backup_root) / f"{name}_{n}"
        n += 1
        # Safety limit
        if n > 10000:
            raise FileExistsError(f"Cannot find available backup directory for {name} (tried over 10000 times)")

    fs.make_directory(candidate)
    return candidate


def save_manifest(plan: RegenerationPlan, backup_dir: Path, directory: Path, fs: FileSystem) -> Path:
    """Record which new file came from which original"""
    manifest = Path(backup_dir) / MANIFEST_NAME

    data = {
        "base_timestamp": plan.base_timestamp.strftime(TIMESTAMP_FORMAT),
        "directory": str(directory),
        "total_files": plan.total_count,
        "operations": [
            {"src": str(op.src), "dst": str(op.dst)}
            for op in plan.ops
        ],
    }

    fs.write_all(manifest, json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8"))
    return manifest


class RegenerationEngine:
    """Backs up the migration files and rewrites their timestamps in the final order"""

    def __init__(
        self,
        directory: Path,
        backup_root: Path,
        fs: Optional[FileSystem] = None,
        clock: Optional[Clock] = None,
        prompt: Optional[UserPrompt] = None,
        dry_run: bool = False,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.directory = Path(directory)
        self.backup_root = Path(backup_root)
        self.fs = fs or LocalFileSystem()
        self.clock = clock or SystemClock()
        self.prompt = prompt or AlwaysConfirm()
        self.dry_run = dry_run
        self.progress_callback = progress_callback
        self.phase = RegenerationPhase.IDLE

    def _enter(self, phase: RegenerationPhase) -> None:
        logger.debug("Regeneration phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def _progress(self, current: int, total: int, message: str) -> None:
        if self.progress_callback:
            self.progress_callback(current, total, message)

    def finalize(self, entries: Sequence[FileEntry]) -> RegenerationResult:
        """
        Ask for confirmation, then back up and rename every file

        Args:
            entries: Files in their final order

        Returns:
            Result (cancelled, dry run or done)

        Raises:
            PlanValidationError: plan rejected, nothing written
            BackupWriteFailure: backup incomplete, no migration touched
            RenameFailure: renaming stopped part way, see backup
        """
        if self.phase in (RegenerationPhase.DONE, RegenerationPhase.FAILED):
            raise RuntimeError(f"Regeneration already ran ({self.phase.value})")

        entries = list(entries)
        self._enter(RegenerationPhase.CONFIRM_PENDING)

        if self.dry_run:
            plan = plan_regeneration(entries, self.clock.now())
            self._enter(RegenerationPhase.IDLE)
            return RegenerationResult(plan=plan, dry_run=True)

        if not self.prompt.confirm(CONFIRM_QUESTION):
            logger.info("Regeneration declined by user")
            self._enter(RegenerationPhase.CANCELLED)
            return RegenerationResult(cancelled=True)

        now = self.clock.now()
        plan = plan_regeneration(entries, now)

        errors = validate_plan(plan, self.fs)
        errors.extend(check_directories([op.src.parent for op in plan.ops] + [self.backup_root]))
        if errors:
            self._enter(RegenerationPhase.FAILED)
            for error in errors:
                logger.error("Plan rejected: %s", error)
            raise PlanValidationError(errors)

        result = RegenerationResult(plan=plan)
        try:
            self._enter(RegenerationPhase.BACKING_UP)
            result.backup_dir = self.backup(entries, now)
            try:
                save_manifest(plan, result.backup_dir, self.directory, self.fs)
            except OSError as e:
                logger.error("Writing %s failed: %s", MANIFEST_NAME, e)
                raise BackupWriteFailure(
                    f"Cannot write {MANIFEST_NAME}: {e}",
                    path=result.backup_dir / MANIFEST_NAME,
                    backup_dir=result.backup_dir,
                ) from e

            self._enter(RegenerationPhase.RENAMING)
            self.rename(plan, result)
        except (BackupWriteFailure, RenameFailure):
            self._enter(RegenerationPhase.FAILED)
            raise

        self._enter(RegenerationPhase.DONE)
        logger.info("Regenerated %d migration files, backup at %s", result.success_count, result.backup_dir)
        return result

    def backup(self, entries: Sequence[FileEntry], now: datetime) -> Path:
        """Copy every original into a new backup directory under its original name"""
        try:
            backup_dir = create_backup_directory(self.backup_root, now, self.fs)
        except OSError as e:
            raise BackupWriteFailure(f"Cannot create backup directory: {e}", path=self.backup_root) from e

        logger.info("Backing up %d files to %s", len(entries), backup_dir)
        total = len(entries)
        for i, entry in enumerate(entries):
            dst = backup_dir / entry.relative_to(self.directory)
            try:
                if dst.parent != backup_dir and not self.fs.exists(dst.parent):
                    self.fs.make_directory(dst.parent)
                self.fs.copy(entry.path, dst)
            except OSError as e:
                logger.error("Backup of %s failed: %s", entry.path, e)
                raise BackupWriteFailure(str(e), path=entry.path, backup_dir=backup_dir) from e
            self._progress(i + 1, total, f"Backing up {entry.name}")

        return backup_dir

    def rename(self, plan: RegenerationPlan, result: RegenerationResult) -> None:
        """Rewrite each file under its new name, in plan order"""
        total = plan.total_count
        for i, op in enumerate(plan.ops):
            step = "read"
            try:
                content = self.fs.read_all(op.src)
                step = "delete"
                self.fs.delete(op.src)
                step = "write"
                self.fs.write_all(op.dst, content)
            except OSError as e:
                logger.error("Rename %s -> %s failed at %s: %s", op.src.name, op.dst.name, step, e)
                raise RenameFailure(
                    f"{step} failed for {op.src.name}: {e}",
                    path=op.src,
                    backup_dir=result.backup_dir,
                    completed=result.renamed,
                    step=step,
                ) from e

            result.renamed.append(op)
            logger.info("Renamed %s -> %s", op.src.name, op.dst.name)
            self._progress(i + 1, total, f"{op.src.name} -> {op.dst.name}")
