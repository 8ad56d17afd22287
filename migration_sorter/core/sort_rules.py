"""
sort_rules.py - Sorting Rules Module

Provides stable single-key sorting of migration files
"""

from typing import List, Callable, Sequence

from .models_fs import FileEntry, SortKey, SortDirection
from .order_state import OrderState


def get_sort_key(sort_by: SortKey) -> Callable[[FileEntry], object]:
    """
    Get sort key function

    Only the chosen attribute is compared, so entries with equal values keep
    their previous relative order.
    """
    if sort_by == SortKey.SIZE:
        return lambda f: f.size
    elif sort_by == SortKey.MTIME:
        return lambda f: f.mtime
    else:
        return lambda f: f.name


def sort_entries(
    entries: Sequence[FileEntry],
    sort_by: SortKey = SortKey.NAME,
    direction: SortDirection = SortDirection.DESC
) -> List[FileEntry]:
    """
    Sort file list

    Args:
        entries: File list
        sort_by: Sorting method
        direction: Sort direction, descending unless chosen otherwise

    Returns:
        Sorted file list (new list)
    """
    key_func = get_sort_key(sort_by)
    # sorted() stays stable with reverse=True
    return sorted(entries, key=key_func, reverse=direction == SortDirection.DESC)


def apply_sort(
    state: OrderState,
    sort_by: SortKey,
    direction: SortDirection = SortDirection.DESC
) -> str:
    """
    Reorder the working sequence; cursor goes to the top and any hold is released

    Returns:
        User-facing confirmation message
    """
    state.apply_order(sort_entries(state.sequence, sort_by, direction))
    return sorted_message(sort_by, direction)


def sort_by_name(state: OrderState, direction: SortDirection = SortDirection.DESC) -> str:
    return apply_sort(state, SortKey.NAME, direction)


def sort_by_size(state: OrderState, direction: SortDirection = SortDirection.DESC) -> str:
    return apply_sort(state, SortKey.SIZE, direction)


def sort_by_date(state: OrderState, direction: SortDirection = SortDirection.DESC) -> str:
    return apply_sort(state, SortKey.MTIME, direction)


_DESCRIPTIONS = {
    SortKey.SIZE: ("Largest to Smallest", "Smallest to Largest"),
    SortKey.MTIME: ("Newest to Oldest", "Oldest to Newest"),
    SortKey.NAME: ("Z to A", "A to Z"),
}

_MESSAGES = {
    SortKey.SIZE: ("Sorted by size (largest first)!", "Sorted by size (smallest first)!"),
    SortKey.MTIME: ("Sorted by date (newest first)!", "Sorted by date (oldest first)!"),
    SortKey.NAME: ("Sorted by name (Z-A)!", "Sorted by name (A-Z)!"),
}


def direction_label(sort_by: SortKey, direction: SortDirection) -> str:
    """Human description of a direction, e.g. 'Newest to Oldest'"""
    desc, asc = _DESCRIPTIONS[sort_by]
    return desc if direction == SortDirection.DESC else asc


def sorted_message(sort_by: SortKey, direction: SortDirection) -> str:
    desc, asc = _MESSAGES[sort_by]
    return desc if direction == SortDirection.DESC else asc
