"""
cli_keys.py - Keyboard Input

Turns terminal input into Commands. Two protocols share the same command set:
- raw: one keystroke at a time (arrow keys, space, enter, escape, letters)
- line: one typed word per line, for terminals without keystroke input
"""

import logging
from typing import Dict, Optional

from ..core.models_fs import Command, CommandType, SortDirection
from ..core.ports import Terminal
from .cli_terminal import raw_mode

logger = logging.getLogger(__name__)

ESC = "\x1b"

KEY_BINDINGS: Dict[str, CommandType] = {
    "\x1b[A": CommandType.MOVE_UP,          # Up arrow
    "\x1bOA": CommandType.MOVE_UP,          # Up arrow (application mode)
    "w": CommandType.MOVE_UP,
    "\x1b[B": CommandType.MOVE_DOWN,        # Down arrow
    "\x1bOB": CommandType.MOVE_DOWN,        # Down arrow (application mode)
    "s": CommandType.SORT_BY_SIZE,          # Down is the arrow only
    " ": CommandType.TOGGLE_GRAB,
    "\n": CommandType.FINISH,
    "\r": CommandType.FINISH,
    ESC: CommandType.CANCEL_OR_RELEASE,
    "q": CommandType.QUIT,
    "r": CommandType.RESET,
    "n": CommandType.SORT_BY_NAME,
    "d": CommandType.SORT_BY_DATE,
}

LINE_COMMANDS: Dict[str, CommandType] = {
    "w": CommandType.MOVE_UP, "up": CommandType.MOVE_UP,
    "s": CommandType.MOVE_DOWN, "down": CommandType.MOVE_DOWN,
    "grab": CommandType.TOGGLE_GRAB, "select": CommandType.TOGGLE_GRAB,
    "drop": CommandType.TOGGLE_GRAB, "place": CommandType.TOGGLE_GRAB, "put": CommandType.TOGGLE_GRAB,
    "space": CommandType.TOGGLE_GRAB, "toggle": CommandType.TOGGLE_GRAB,
    "finish": CommandType.FINISH, "done": CommandType.FINISH, "complete": CommandType.FINISH,
    "q": CommandType.QUIT, "quit": CommandType.QUIT, "exit": CommandType.QUIT,
    "r": CommandType.RESET, "reset": CommandType.RESET,
    "n": CommandType.SORT_BY_NAME, "name": CommandType.SORT_BY_NAME,
    "d": CommandType.SORT_BY_DATE, "date": CommandType.SORT_BY_DATE,
    "size": CommandType.SORT_BY_SIZE,
    "esc": CommandType.CANCEL_OR_RELEASE, "escape": CommandType.CANCEL_OR_RELEASE,
    "cancel": CommandType.CANCEL_OR_RELEASE,
}

LINE_HINT = "Enter command: w=up | s=down | grab | drop | finish | q=quit | r=reset | n/d/size=sort"
LINE_AVAILABLE = "Available: w, s, grab, drop, finish, cancel, q, r, n, d, size"


def map_key(key: str) -> Command:
    """Map one keystroke (or escape sequence) to a command"""
    command_type = KEY_BINDINGS.get(key)
    if command_type is None:
        return Command(CommandType.UNRECOGNIZED, raw=key)
    return Command(command_type)


def map_line(line: str) -> Optional[Command]:
    """Map a typed word to a command; None when it is not a known word"""
    command_type = LINE_COMMANDS.get(line.strip().lower())
    if command_type is None:
        return None
    return Command(command_type)


def parse_direction(choice: str) -> SortDirection:
    """'2' selects ascending; anything else (1, enter, other) descending"""
    return SortDirection.ASC if choice.strip() == "2" else SortDirection.DESC


def _utf8_length(lead: int) -> int:
    """Number of continuation bytes announced by a UTF-8 lead byte"""
    if lead < 0x80:
        return 0
    if 0xC0 <= lead < 0xE0:
        return 1
    if 0xE0 <= lead < 0xF0:
        return 2
    if 0xF0 <= lead < 0xF8:
        return 3
    return 0


class RawKeyController:
    """Reads single keystrokes"""

    raw_mode = True

    def __init__(self, terminal: Terminal, escape_timeout: float = 0.05):
        self.terminal = terminal
        self.escape_timeout = escape_timeout

    def _read_char(self) -> str:
        data = self.terminal.read_raw_byte()
        for _ in range(_utf8_length(data[0])):
            data += self.terminal.read_raw_byte()
        return data.decode("utf-8", errors="replace")

    def read_key(self) -> str:
        """
        Read one keystroke

        A lone ESC is returned as is; ESC followed by '[' or 'O' is read up to
        the final byte of the sequence (e.g. '\\x1b[A').
        """
        with raw_mode(self.terminal):
            key = self._read_char()
            if key != ESC or not self.terminal.pending(self.escape_timeout):
                return key

            intro = self._read_char()
            key += intro
            if intro == "O":
                return key + self._read_char()
            if intro != "[":
                return key

            while True:
                ch = self._read_char()
                key += ch
                if "@" <= ch <= "~":
                    return key

    def read_command(self) -> Command:
        try:
            key = self.read_key()
        except EOFError:
            return Command(CommandType.QUIT, raw="EOF")
        command = map_key(key)
        if command.type == CommandType.UNRECOGNIZED:
            logger.debug("Ignoring key %r", key)
        return command

    def read_direction(self) -> SortDirection:
        try:
            with raw_mode(self.terminal):
                choice = self._read_char()
        except EOFError:
            return SortDirection.DESC
        return parse_direction(choice)


class LineCommandController:
    """Reads one command word per line, re-prompting until it is valid"""

    raw_mode = False

    def __init__(self, terminal: Terminal):
        self.terminal = terminal

    def read_command(self) -> Command:
        self.terminal.print()
        self.terminal.print(LINE_HINT)

        while True:
            try:
                line = self.terminal.read_line("> ")
            except EOFError:
                return Command(CommandType.QUIT, raw="EOF")

            if not line.strip():
                self.terminal.print("Enter a command")
                continue

            command = map_line(line)
            if command is not None:
                return command

            logger.debug("Unknown command %r", line)
            self.terminal.print(f"Unknown command: '{line.strip()}'")
            self.terminal.print(LINE_AVAILABLE)

    def read_direction(self) -> SortDirection:
        try:
            return parse_direction(self.terminal.read_line("> "))
        except EOFError:
            return SortDirection.DESC


def create_controller(terminal: Terminal, mode: str = "auto"):
    """
    Pick the input protocol

    Args:
        terminal: Terminal to read from
        mode: "raw", "line" or "auto" (raw when the terminal supports it)

    Returns:
        RawKeyController or LineCommandController
    """
    if mode == "line":
        return LineCommandController(terminal)

    if terminal.supports_raw():
        return RawKeyController(terminal)

    if mode == "raw":
        logger.warning("Terminal does not support keystroke input, using line mode")
    return LineCommandController(terminal)
