"""
cli_terminal.py - Console Terminal

Terminal implementation over stdin/stdout. Single keystrokes are read in
cbreak mode (no line buffering, no echo) where termios is available; raw_mode()
guarantees the previous terminal settings are restored on every exit path.
"""

import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

try:
    import select
    import termios
    import tty

    _HAS_TERMIOS = True
except ImportError:
    _HAS_TERMIOS = False

from ..core.ports import Terminal

CLEAR_SCREEN = "\033[2J\033[H"


class ConsoleTerminal:
    """Terminal over the process's stdin/stdout"""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._saved_attrs = None

    def supports_raw(self) -> bool:
        """Whether single keystrokes can be read (POSIX terminal on stdin)"""
        if not _HAS_TERMIOS:
            return False
        try:
            return self.stdin.isatty()
        except (AttributeError, ValueError):
            return False

    def read_raw_byte(self) -> bytes:
        self.stdout.flush()
        # os.read bypasses the text layer so select() sees every pending byte
        data = os.read(self.stdin.fileno(), 1)
        if not data:
            raise EOFError("Input closed")
        return data

    def pending(self, timeout: float = 0.0) -> bool:
        ready, _, _ = select.select([self.stdin.fileno()], [], [], timeout)
        return bool(ready)

    def read_line(self, prompt: str = "") -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("Input closed")
        return line.rstrip("\r\n")

    def set_raw_mode(self) -> None:
        fd = self.stdin.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        tty.setcbreak(fd)

    def set_cooked_mode(self) -> None:
        if self._saved_attrs is None:
            return
        termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
        self._saved_attrs = None

    def clear_screen(self) -> None:
        self.stdout.write(CLEAR_SCREEN)
        self.stdout.flush()

    def print(self, text: str = "") -> None:
        self.stdout.write(text + "\n")
        self.stdout.flush()


@contextmanager
def raw_mode(terminal: Terminal) -> Iterator[Terminal]:
    """Keystroke mode for the duration of the block, cooked mode afterwards"""
    terminal.set_raw_mode()
    try:
        yield terminal
    finally:
        terminal.set_cooked_mode()


class ConsolePrompt:
    """Yes/no confirmation through a terminal"""

    def __init__(self, terminal: Terminal, default: bool = False):
        self.terminal = terminal
        self.default = default

    def confirm(self, question: str) -> bool:
        default_str = "Y/n" if self.default else "y/N"
        try:
            value = self.terminal.read_line(f"{question} ({default_str}): ").strip().lower()
        except EOFError:
            return False
        if not value:
            return self.default
        return value in ("y", "yes")
