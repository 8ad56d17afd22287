"""
core - Migration Sorter Core Module

Provides file loading, interactive ordering state, sorting, rendering,
timestamp regeneration planning and execution.
"""

from .models_fs import (
    FileEntry,
    Command,
    CommandType,
    SortKey,
    SortDirection,
    RenameOp,
    RegenerationPlan,
    SorterOptions,
)

from .errors import (
    SorterError,
    DirectoryNotFound,
    DirectoryUnreadable,
    RegenerationError,
    PlanValidationError,
    BackupWriteFailure,
    RenameFailure,
)

from .ports import (
    FileSystem,
    Clock,
    Terminal,
    UserPrompt,
    LocalFileSystem,
    SystemClock,
)

from .scan_files import (
    load_catalog,
    load_from_options,
)

from .order_state import OrderState

from .sort_rules import (
    sort_entries,
    apply_sort,
    get_sort_key,
    direction_label,
)

from .render_view import (
    render_frame,
    render_direction_prompt,
    status_lines,
    format_size,
    format_modified,
)

from .plan_rename import (
    base_timestamp,
    timestamp_at,
    split_migration_name,
    generate_new_name,
    plan_regeneration,
    validate_plan,
)

from .exec_rename import (
    RegenerationEngine,
    RegenerationPhase,
    RegenerationResult,
    AlwaysConfirm,
)

from .config import load_options
from .logger_setup import configure_logging

__all__ = [
    # Data models
    "FileEntry",
    "Command",
    "CommandType",
    "SortKey",
    "SortDirection",
    "RenameOp",
    "RegenerationPlan",
    "SorterOptions",

    # Errors
    "SorterError",
    "DirectoryNotFound",
    "DirectoryUnreadable",
    "RegenerationError",
    "PlanValidationError",
    "BackupWriteFailure",
    "RenameFailure",

    # Collaborators
    "FileSystem",
    "Clock",
    "Terminal",
    "UserPrompt",
    "LocalFileSystem",
    "SystemClock",

    # Scanning
    "load_catalog",
    "load_from_options",

    # Ordering and sorting
    "OrderState",
    "sort_entries",
    "apply_sort",
    "get_sort_key",
    "direction_label",

    # Rendering
    "render_frame",
    "render_direction_prompt",
    "status_lines",
    "format_size",
    "format_modified",

    # Planning
    "base_timestamp",
    "timestamp_at",
    "split_migration_name",
    "generate_new_name",
    "plan_regeneration",
    "validate_plan",

    # Execution
    "RegenerationEngine",
    "RegenerationPhase",
    "RegenerationResult",
    "AlwaysConfirm",

    # Configuration
    "load_options",
    "configure_logging",
]
