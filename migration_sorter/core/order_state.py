"""
order_state.py - Interactive Ordering State

Holds the working order of the loaded files together with the cursor and the
grabbed ("held") item. Files are never added or removed here, only reordered.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .models_fs import FileEntry

logger = logging.getLogger(__name__)


class OrderState:
    """Working order, original order, cursor and held index"""

    def __init__(self, entries: Iterable[FileEntry]):
        self.sequence: List[FileEntry] = list(entries)
        if len(set(self.sequence)) != len(self.sequence):
            raise ValueError("Duplicate file entries in working set")
        # Snapshot taken once, only used by reset()
        self.original_sequence: Tuple[FileEntry, ...] = tuple(self.sequence)
        self.cursor: int = 0
        self.held: Optional[int] = None

    def __len__(self) -> int:
        return len(self.sequence)

    @property
    def is_empty(self) -> bool:
        return not self.sequence

    @property
    def is_holding(self) -> bool:
        return self.held is not None

    @property
    def current(self) -> Optional[FileEntry]:
        """Entry under the cursor"""
        if self.is_empty:
            return None
        return self.sequence[self.cursor]

    @property
    def held_entry(self) -> Optional[FileEntry]:
        if self.held is None:
            return None
        return self.sequence[self.held]

    def names(self) -> List[str]:
        return [entry.name for entry in self.sequence]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.sequence):
            raise IndexError(f"Position {index} out of range (0..{len(self.sequence) - 1})")

    def move_cursor(self, delta: int) -> bool:
        """
        Move the cursor, clamped to the list bounds (no wraparound)

        Returns:
            Whether the cursor actually moved
        """
        if self.is_empty:
            return False
        new_index = max(0, min(len(self.sequence) - 1, self.cursor + delta))
        moved = new_index != self.cursor
        self.cursor = new_index
        return moved

    def grab(self, index: Optional[int] = None) -> Optional[Tuple[int, int]]:
        """
        Grab the item at index (default: cursor), or drop the held item there

        Returns:
            None when an item was grabbed, (from, to) when the held item was dropped
        """
        index = self.cursor if index is None else index
        self._check_index(index)

        if self.held is None:
            self.held = index
            logger.debug("Grabbed %s at %d", self.sequence[index].name, index)
            return None

        from_index = self.held
        self.move(from_index, index)
        return from_index, index

    def move(self, from_index: int, to_index: int) -> None:
        """
        Remove the item at from_index and insert it at to_index of the shortened list

        The cursor follows the moved item; any hold is released.
        """
        self._check_index(from_index)
        self._check_index(to_index)

        if from_index != to_index:
            entry = self.sequence.pop(from_index)
            self.sequence.insert(to_index, entry)
            logger.debug("Moved %s from %d to %d", entry.name, from_index, to_index)

        self.cursor = to_index
        self.held = None

    def cancel_grab(self) -> bool:
        """Release the held item without reordering; returns whether something was held"""
        was_holding = self.held is not None
        self.held = None
        return was_holding

    def reset(self) -> None:
        """Restore the order captured at load time"""
        self.sequence = list(self.original_sequence)
        self.cursor = 0
        self.held = None

    def apply_order(self, entries: Sequence[FileEntry]) -> None:
        """
        Adopt a complete new ordering (used by sorting)

        Raises:
            ValueError: entries is not a permutation of the working set
        """
        entries = list(entries)
        if len(entries) != len(self.sequence) or set(entries) != set(self.sequence):
            raise ValueError("New order must be a permutation of the loaded files")
        self.sequence = entries
        self.cursor = 0
        self.held = None

    def is_permutation_of_original(self) -> bool:
        return (len(self.sequence) == len(self.original_sequence)
                and set(self.sequence) == set(self.original_sequence))
