"""
models_fs.py - Core Data Structure Definitions

Contains:
- FileEntry: Immutable snapshot of one migration file
- Command: Abstract user command produced by the input layer
- RenameOp / RegenerationPlan: Timestamp regeneration plan
- SorterOptions: Sorter configuration
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, List
from enum import Enum


class SortKey(Enum):
    """Sort key enumeration"""
    NAME = "name"        # Filename
    SIZE = "size"        # File size
    MTIME = "date"       # Modification time


class SortDirection(Enum):
    """Sort direction enumeration"""
    DESC = "desc"        # Largest / newest / Z first (default)
    ASC = "asc"          # Smallest / oldest / A first


class CommandType(Enum):
    """Closed set of commands understood by the sorting loop"""
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    TOGGLE_GRAB = "toggle_grab"
    FINISH = "finish"
    CANCEL_OR_RELEASE = "cancel_or_release"
    QUIT = "quit"
    RESET = "reset"
    SORT_BY_NAME = "sort_by_name"
    SORT_BY_DATE = "sort_by_date"
    SORT_BY_SIZE = "sort_by_size"
    UNRECOGNIZED = "unrecognized"


SORT_COMMANDS = {
    CommandType.SORT_BY_NAME: SortKey.NAME,
    CommandType.SORT_BY_DATE: SortKey.MTIME,
    CommandType.SORT_BY_SIZE: SortKey.SIZE,
}


@dataclass(frozen=True)
class FileEntry:
    """File snapshot taken once at catalog load"""
    path: Path                      # Absolute path
    name: str                       # Filename (with suffix)
    size: int                       # File size (bytes)
    mtime: float                    # Modification time (timestamp)

    @classmethod
    def from_path(cls, p: Path) -> "FileEntry":
        """Create FileEntry from Path object"""
        p = Path(p).resolve()
        stat = p.stat()
        return cls(
            path=p,
            name=p.name,
            size=stat.st_size,
            mtime=stat.st_mtime,
        )

    @property
    def modified_at(self) -> datetime:
        return datetime.fromtimestamp(self.mtime)

    def relative_to(self, base: Path) -> Path:
        """Get path relative to base (falls back to the bare name)"""
        try:
            return self.path.relative_to(Path(base).resolve())
        except ValueError:
            return Path(self.name)


@dataclass(frozen=True)
class Command:
    """Abstract command; direction is only used by the sort commands"""
    type: CommandType
    direction: Optional[SortDirection] = None   # None: ask the user
    raw: str = ""                               # Original input for UNRECOGNIZED

    @property
    def sort_key(self) -> Optional[SortKey]:
        return SORT_COMMANDS.get(self.type)

    @property
    def is_sort(self) -> bool:
        return self.type in SORT_COMMANDS


@dataclass(frozen=True)
class RenameOp:
    """Single regeneration operation"""
    src: Path                       # Original path
    dst: Path                       # Path with the new timestamp

    @property
    def is_same(self) -> bool:
        return self.src == self.dst


@dataclass
class RegenerationPlan:
    """New names for the final order, computed before touching the disk"""
    base_timestamp: datetime
    ops: List[RenameOp] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.ops)

    def add_op(self, src: Path, dst: Path) -> None:
        self.ops.append(RenameOp(src=src, dst=dst))

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Regeneration Plan:",
            f"  - Base timestamp: {self.base_timestamp:%Y_%m_%d_%H%M%S}",
            f"  - Files: {self.total_count}",
            f"  - Errors: {len(self.errors)}",
        ]
        return "\n".join(lines)


INPUT_MODES = ("auto", "raw", "line")


@dataclass
class SorterOptions:
    """Sorter options configuration"""
    # Source files
    directory: Path = field(default_factory=lambda: Path("database") / "migrations")
    extension: str = ".php"         # Migration source extension
    recursive: bool = False         # Also scan subdirectories
    include_hidden: bool = False    # Whether to include hidden files

    # Backup
    backup_root: Path = field(default_factory=lambda: Path("storage") / "app" / "migration_backups")

    # Interaction
    input_mode: str = "auto"        # auto / raw / line
    message_delay: float = 1.0      # Pause after transient messages (seconds)
    idle_delay: float = 0.05        # Pause per loop iteration (seconds)
    name_width: int = 60            # Display width of the filename column

    # Execution options
    dry_run: bool = False           # Preview only, do not actually execute
    assume_yes: bool = False        # Skip the confirmation question

    def __post_init__(self):
        self.directory = Path(self.directory)
        self.backup_root = Path(self.backup_root)
        self.extension = normalize_extension(self.extension)
        if self.input_mode not in INPUT_MODES:
            raise ValueError(f"Unknown input mode: {self.input_mode} (expected one of {', '.join(INPUT_MODES)})")

    def resolved_directory(self, cwd: Optional[Path] = None) -> Path:
        base = Path(cwd) if cwd else Path.cwd()
        return (base / self.directory).resolve()

    def resolved_backup_root(self, cwd: Optional[Path] = None) -> Path:
        base = Path(cwd) if cwd else Path.cwd()
        return (base / self.backup_root).resolve()


def normalize_extension(extension: str) -> str:
    """Return extension with a leading dot (empty string means no filter)"""
    extension = (extension or "").strip()
    if extension and not extension.startswith('.'):
        extension = '.' + extension
    return extension
