"""
ports.py - Collaborator Interfaces

The sorter core only talks to the outside world through these narrow interfaces:
- FileSystem: listing, copying, reading and writing migration files
- Clock: current wall-clock time
- Terminal: raw keystrokes, line input and screen output
- UserPrompt: yes/no confirmation

LocalFileSystem and SystemClock are the production implementations; the terminal
implementation lives in cli.cli_terminal.
"""

import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Protocol


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def list_files(self, directory: Path, recursive: bool = False) -> List[Path]: ...

    def copy(self, src: Path, dst: Path) -> None: ...

    def delete(self, path: Path) -> None: ...

    def read_all(self, path: Path) -> bytes: ...

    def write_all(self, path: Path, content: bytes) -> None: ...

    def make_directory(self, path: Path) -> None: ...


class Clock(Protocol):
    def now(self) -> datetime: ...


class Terminal(Protocol):
    def supports_raw(self) -> bool: ...

    def read_raw_byte(self) -> bytes: ...

    def pending(self, timeout: float = 0.0) -> bool: ...

    def read_line(self, prompt: str = "") -> str: ...

    def set_raw_mode(self) -> None: ...

    def set_cooked_mode(self) -> None: ...

    def clear_screen(self) -> None: ...

    def print(self, text: str = "") -> None: ...


class UserPrompt(Protocol):
    def confirm(self, question: str) -> bool: ...


class LocalFileSystem:
    """FileSystem backed by the local disk"""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def list_files(self, directory: Path, recursive: bool = False) -> List[Path]:
        """
        List regular files in native enumeration order

        Args:
            directory: Directory to list
            recursive: Whether to descend into subdirectories

        Returns:
            File paths
        """
        directory = Path(directory)
        if not recursive:
            return [item for item in directory.iterdir() if item.is_file()]

        results: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(directory):
            current_dir = Path(dirpath)
            for filename in filenames:
                filepath = current_dir / filename
                if filepath.is_file():
                    results.append(filepath)
        return results

    def copy(self, src: Path, dst: Path) -> None:
        shutil.copy2(src, dst)

    def delete(self, path: Path) -> None:
        os.remove(path)

    def read_all(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def write_all(self, path: Path, content: bytes) -> None:
        Path(path).write_bytes(content)

    def make_directory(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=False)


class SystemClock:
    """Clock returning local wall-clock time"""

    def now(self) -> datetime:
        return datetime.now()
