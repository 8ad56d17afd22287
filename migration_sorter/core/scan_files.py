"""
scan_files.py - File Scanning Module

Loads the migration files of a directory into FileEntry snapshots
"""

import logging
from pathlib import Path
from typing import List, Optional

from .errors import DirectoryNotFound, DirectoryUnreadable
from .models_fs import FileEntry, SorterOptions, normalize_extension
from .ports import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)


def matches_extension(path: Path, extension: str) -> bool:
    """Case-insensitive suffix check (empty extension matches everything)"""
    if not extension:
        return True
    return path.suffix.lower() == normalize_extension(extension).lower()


def load_catalog(
    directory: Path,
    extension: str = ".php",
    recursive: bool = False,
    include_hidden: bool = False,
    fs: Optional[FileSystem] = None,
) -> List[FileEntry]:
    """
    Scan a migrations directory

    Args:
        directory: Migrations directory
        extension: Migration source extension (e.g., ".php")
        recursive: Whether to scan subdirectories too
        include_hidden: Whether to include hidden files
        fs: File system implementation

    Returns:
        File entries in the file system's enumeration order (may be empty)

    Raises:
        DirectoryNotFound: directory does not exist
        DirectoryUnreadable: directory cannot be listed
    """
    fs = fs or LocalFileSystem()
    directory = Path(directory).resolve()
    if not fs.is_dir(directory):
        raise DirectoryNotFound(directory)

    results: List[FileEntry] = []

    try:
        items = fs.list_files(directory, recursive=recursive)
    except OSError as e:
        logger.error("Cannot list %s: %s", directory, e)
        raise DirectoryUnreadable(directory, e.strerror or str(e)) from e

    for item in items:
        # Skip hidden files (and anything inside hidden directories)
        if not include_hidden:
            rel_parts = Path(item).relative_to(directory).parts
            if any(part.startswith('.') for part in rel_parts):
                continue

        if not matches_extension(Path(item), extension):
            continue

        try:
            results.append(FileEntry.from_path(item))
        except OSError as e:
            # The file vanished or became unreadable between listing and stat
            logger.warning("Cannot access %s: %s", item, e)

    logger.info("Loaded %d migration files from %s", len(results), directory)
    return results


def load_from_options(options: SorterOptions, fs: Optional[FileSystem] = None) -> List[FileEntry]:
    """Scan the directory configured in options"""
    return load_catalog(
        options.resolved_directory(),
        extension=options.extension,
        recursive=options.recursive,
        include_hidden=options.include_hidden,
        fs=fs,
    )
