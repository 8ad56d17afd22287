"""
config.py - Configuration Loading

Options come from, in increasing priority:
1. SorterOptions defaults
2. A TOML file: --config PATH, else .migration-sorter.toml in the working
   directory, else the [tool.migration-sorter] table of pyproject.toml
3. Command-line flags (applied by the caller)
"""

import logging
import tomllib
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .models_fs import SorterOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".migration-sorter.toml"
PYPROJECT_TABLE = "migration-sorter"

_PATH_FIELDS = {"directory", "backup_root"}

# TOML value types accepted per option
_FIELD_TYPES = {
    "directory": (str,),
    "extension": (str,),
    "recursive": (bool,),
    "include_hidden": (bool,),
    "backup_root": (str,),
    "input_mode": (str,),
    "message_delay": (int, float),
    "idle_delay": (int, float),
    "name_width": (int,),
    "dry_run": (bool,),
    "assume_yes": (bool,),
}


def find_config_file(cwd: Optional[Path] = None) -> Optional[Tuple[Path, bool]]:
    """
    Locate the configuration file

    Returns:
        (path, is_pyproject) or None when there is none
    """
    cwd = Path(cwd) if cwd else Path.cwd()

    dedicated = cwd / CONFIG_FILENAME
    if dedicated.is_file():
        return dedicated, False

    pyproject = cwd / "pyproject.toml"
    if pyproject.is_file():
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
        if PYPROJECT_TABLE in data.get("tool", {}):
            return pyproject, True

    return None


def read_config_table(path: Path, is_pyproject: bool = False) -> Dict[str, Any]:
    with open(path, "rb") as f:
        data = tomllib.load(f)
    if is_pyproject:
        return dict(data.get("tool", {}).get(PYPROJECT_TABLE, {}))
    return data


def _check_type(key: str, name: str, value: Any) -> None:
    expected = _FIELD_TYPES.get(name)
    if expected is None:
        return
    # bool is an int subclass
    if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
        names = " or ".join(t.__name__ for t in expected)
        raise ValueError(
            f"Invalid value for configuration key {key}: expected {names}, got {type(value).__name__}"
        )


def options_from_table(table: Dict[str, Any], base: Optional[SorterOptions] = None) -> SorterOptions:
    """
    Apply a configuration table on top of base options

    Keys may use dashes or underscores (backup-root / backup_root).

    Raises:
        ValueError: unknown key or value of the wrong type
    """
    base = base or SorterOptions()
    known = {f.name for f in fields(SorterOptions)}

    values: Dict[str, Any] = {}
    for key, value in table.items():
        name = key.replace("-", "_")
        if name not in known:
            raise ValueError(f"Unknown configuration key: {key}")
        _check_type(key, name, value)
        if name in _PATH_FIELDS:
            value = Path(value)
        values[name] = value

    return replace(base, **values)


def load_options(config_path: Optional[Path] = None, cwd: Optional[Path] = None) -> SorterOptions:
    """
    Load options from the configuration file, if any

    Args:
        config_path: Explicit configuration file (must exist)
        cwd: Directory to search when no explicit file is given

    Returns:
        Options with file values applied
    """
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.is_file():
            raise ValueError(f"Configuration file does not exist: {config_path}")
        is_pyproject = config_path.name == "pyproject.toml"
        table = read_config_table(config_path, is_pyproject)
        logger.debug("Loaded configuration from %s", config_path)
        return options_from_table(table)

    found = find_config_file(cwd)
    if found is None:
        return SorterOptions()

    path, is_pyproject = found
    logger.debug("Loaded configuration from %s", path)
    return options_from_table(read_config_table(path, is_pyproject))
