"""
plan_rename.py - Regeneration Plan Module

Responsibilities:
- Generate order-preserving timestamps (base + i seconds)
- Swap the leading timestamp of each migration filename
- Validate the resulting plan before anything is written
"""

import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
from collections import defaultdict

from .models_fs import FileEntry, RegenerationPlan
from .ports import FileSystem, LocalFileSystem
from .safety_checks import is_valid_filename

TIMESTAMP_FORMAT = "%Y_%m_%d_%H%M%S"

# 2024_01_01_120000_create_users_table.php -> create_users_table.php
MIGRATION_NAME_PATTERN = re.compile(r"^\d{4}_\d{2}_\d{2}_\d{6}_(.+)$")


def base_timestamp(now: datetime) -> datetime:
    """Truncate to whole seconds, the granularity of migration timestamps"""
    return now.replace(microsecond=0)


def timestamp_at(base: datetime, index: int) -> str:
    """Timestamp for position index of the final order"""
    return (base + timedelta(seconds=index)).strftime(TIMESTAMP_FORMAT)


def split_migration_name(name: str) -> Tuple[Optional[str], str]:
    """
    Split a filename into its timestamp prefix and the rest

    Returns:
        (timestamp or None, rest); a name without a timestamp prefix is kept whole
    """
    match = MIGRATION_NAME_PATTERN.match(name)
    if match:
        rest = match.group(1)
        return name[:-len(rest) - 1], rest
    return None, name


def generate_new_name(original_name: str, new_timestamp: str) -> str:
    _, rest = split_migration_name(original_name)
    return f"{new_timestamp}_{rest}"


def plan_regeneration(entries: Sequence[FileEntry], now: datetime) -> RegenerationPlan:
    """
    Compute new names for the final order

    Args:
        entries: Files in their final order
        now: Current time (truncated to seconds for the base timestamp)

    Returns:
        Plan with one operation per file, in order
    """
    base = base_timestamp(now)
    plan = RegenerationPlan(base_timestamp=base)

    for i, entry in enumerate(entries):
        new_name = generate_new_name(entry.name, timestamp_at(base, i))
        plan.add_op(entry.path, entry.path.parent / new_name)

    return plan


def validate_plan(plan: RegenerationPlan, fs: Optional[FileSystem] = None) -> List[str]:
    """
    Validate regeneration plan

    Rejects invalid names, duplicate destinations, destinations that would
    overwrite a file outside the working set, and destinations equal to the
    original path of a file that is processed later (its content would be
    overwritten before it is read).

    Args:
        plan: Regeneration plan
        fs: File system implementation

    Returns:
        Error list
    """
    fs = fs or LocalFileSystem()
    errors: List[str] = []

    sources: Dict[Path, int] = {op.src: i for i, op in enumerate(plan.ops)}

    dst_set: Dict[Path, List[Path]] = defaultdict(list)
    for op in plan.ops:
        dst_set[op.dst].append(op.src)

    for dst, srcs in dst_set.items():
        if len(srcs) > 1:
            errors.append(f"Multiple files have the same destination: {[str(s) for s in srcs]} -> {dst}")

    for i, op in enumerate(plan.ops):
        valid, error = is_valid_filename(op.dst.name)
        if not valid:
            errors.append(f"{op.src.name}: {error}")
            continue

        if op.is_same:
            continue

        if op.dst in sources:
            if sources[op.dst] > i:
                errors.append(f"{op.src.name} -> {op.dst.name} would overwrite a file that has not been processed yet")
        elif fs.exists(op.dst):
            errors.append(f"Destination already exists: {op.dst}")

    return errors
