"""
render_view.py - Frame Rendering

Pure projection of an OrderState into the text frame shown by the interactive
loop. Nothing here prints or clears the screen.
"""

from datetime import datetime
from typing import List, Optional

from .models_fs import SortKey, SortDirection
from .order_state import OrderState
from .sort_rules import direction_label

CURSOR_MARK = "●"
IDLE_MARK = "○"
GRABBED = "GRABBED"

RAW_CONTROLS = [
    "Controls: ↑/↓=navigate | SPACE=grab/drop | ENTER=finish | ESC=cancel | Q=quit",
    "Sort: N=name, D=date, S=size | R=reset",
]

LINE_CONTROLS = [
    "Controls: W=up, S=down | GRAB/DROP | FINISH=done | N=name, D=date, SIZE=size | R=reset, Q=quit",
    "Type commands and press ENTER (e.g., 'W' then ENTER for up)",
]

_SORT_TITLES = {
    SortKey.NAME: "name",
    SortKey.SIZE: "size",
    SortKey.MTIME: "date",
}


def format_size(size: int) -> str:
    """Human readable file size"""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            if unit == "B":
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GB"


def format_modified(mtime: float) -> str:
    return datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M")


def truncate(name: str, width: int) -> str:
    """Limit name to width characters, ending with '...' when cut"""
    if width <= 3 or len(name) <= width:
        return name
    return name[:width - 3] + "..."


def status_lines(state: OrderState, raw_mode: bool = True) -> List[str]:
    """Mode description plus the file under the cursor"""
    lines = []
    held = state.held_entry
    if held is not None:
        lines.append(f"Moving: {held.name}")
        lines.append("Use navigation to move, then GRAB/DROP to place here")
    else:
        lines.append("Ready to sort")
        if raw_mode:
            lines.append("Navigate with arrows, GRAB to select file, FINISH when done")
        else:
            lines.append("Navigate with W/S, GRAB to select file, FINISH when done")

    current = state.current
    if current is not None:
        lines.append(f"Current: {current.name}")
    return lines


def render_table(state: OrderState, name_width: int = 60) -> List[str]:
    """One header, one separator and one row per file"""
    pos_width = max(1, len(str(len(state.sequence))))
    name_col = max(len("Migration File Name"),
                   min(name_width, max((len(e.name) for e in state.sequence), default=0)))

    header = (f"{'#':>{pos_width}}  {'Sel':<3}  {'Migration File Name':<{name_col}}  "
              f"{'Size':>9}  {'Modified Date':<16}  Status")
    lines = [header, "-" * len(header)]

    for index, entry in enumerate(state.sequence):
        mark = CURSOR_MARK if index == state.cursor else IDLE_MARK
        status = GRABBED if index == state.held else ""
        row = (f"{index + 1:>{pos_width}}  {mark:<3}  {truncate(entry.name, name_width):<{name_col}}  "
               f"{format_size(entry.size):>9}  {format_modified(entry.mtime):<16}  {status}")
        lines.append(row.rstrip())
    return lines


def render_frame(
    state: OrderState,
    raw_mode: bool = True,
    name_width: int = 60,
    message: Optional[str] = None
) -> str:
    """
    Build the complete frame for one loop iteration

    Args:
        state: Current ordering state
        raw_mode: Whether single keystrokes are read (selects the controls hint)
        name_width: Display width of the filename column
        message: Optional transient message appended at the bottom

    Returns:
        Frame text
    """
    lines = ["Interactive Migration File Sorting - Current Order:"]
    lines.extend(RAW_CONTROLS if raw_mode else LINE_CONTROLS)
    lines.append("")

    if state.is_empty:
        lines.append("(no migration files)")
    else:
        lines.extend(render_table(state, name_width))
    lines.append("")

    lines.extend(status_lines(state, raw_mode))
    if message:
        lines.append("")
        lines.append(message)
    return "\n".join(lines)


def render_direction_prompt(sort_by: SortKey, raw_mode: bool = True) -> str:
    """Screen asking for the direction of a sort"""
    lines = [
        f"Sort by {_SORT_TITLES[sort_by]}",
        "Choose sort direction:",
        f"1. Descending (Default) - {direction_label(sort_by, SortDirection.DESC)}",
        f"2. Ascending - {direction_label(sort_by, SortDirection.ASC)}",
        "",
    ]
    if raw_mode:
        lines.append("Press 1 for descending, 2 for ascending, or ENTER for default (descending):")
    else:
        lines.append("Enter 1 for descending, 2 for ascending, or press ENTER for default (descending):")
    return "\n".join(lines)
