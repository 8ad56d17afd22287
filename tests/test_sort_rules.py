"""Tests for sorting rules."""

import pytest

from migration_sorter.core import OrderState, SortKey, SortDirection
from migration_sorter.core.sort_rules import (
    sort_entries, apply_sort, sort_by_size, sort_by_date, sort_by_name,
    direction_label, sorted_message,
)
from mocks import make_entry


def names(entries):
    return [entry.name for entry in entries]


@pytest.fixture
def sized():
    return [
        make_entry("A.php", size=10, mtime=300),
        make_entry("B.php", size=10, mtime=100),
        make_entry("C.php", size=5, mtime=200),
    ]


def test_size_descending_keeps_ties_in_order(sized):
    assert names(sort_entries(sized, SortKey.SIZE, SortDirection.DESC)) == ["A.php", "B.php", "C.php"]


def test_size_ascending_keeps_ties_in_order(sized):
    assert names(sort_entries(sized, SortKey.SIZE, SortDirection.ASC)) == ["C.php", "A.php", "B.php"]


def test_date_sorting(sized):
    assert names(sort_entries(sized, SortKey.MTIME, SortDirection.DESC)) == ["A.php", "C.php", "B.php"]
    assert names(sort_entries(sized, SortKey.MTIME, SortDirection.ASC)) == ["B.php", "C.php", "A.php"]


def test_default_direction_is_descending():
    entries = [make_entry(n) for n in ("b.php", "a.php", "c.php")]
    assert names(sort_entries(entries)) == ["c.php", "b.php", "a.php"]


def test_name_sort_is_case_sensitive():
    entries = [make_entry(n) for n in ("b.php", "B.php", "a.php")]
    assert names(sort_entries(entries, SortKey.NAME, SortDirection.ASC)) == ["B.php", "a.php", "b.php"]


def test_sort_entries_returns_new_list(sized):
    result = sort_entries(sized, SortKey.SIZE, SortDirection.ASC)
    assert result is not sized
    assert names(sized) == ["A.php", "B.php", "C.php"]


def test_apply_sort_resets_cursor_and_hold(sized):
    state = OrderState(sized)
    state.move_cursor(2)
    state.grab()

    message = apply_sort(state, SortKey.SIZE, SortDirection.ASC)

    assert message == "Sorted by size (smallest first)!"
    assert names(state.sequence) == ["C.php", "A.php", "B.php"]
    assert state.cursor == 0
    assert state.held is None


def test_sort_shortcuts(sized):
    state = OrderState(sized)
    assert sort_by_size(state) == "Sorted by size (largest first)!"
    assert sort_by_date(state, SortDirection.ASC) == "Sorted by date (oldest first)!"
    assert names(state.sequence) == ["B.php", "C.php", "A.php"]
    assert sort_by_name(state) == "Sorted by name (Z-A)!"
    assert names(state.sequence) == ["C.php", "B.php", "A.php"]


def test_sorting_twice_is_stable(sized):
    once = sort_entries(sized, SortKey.SIZE, SortDirection.DESC)
    twice = sort_entries(once, SortKey.SIZE, SortDirection.DESC)
    assert once == twice


@pytest.mark.parametrize("sort_by, direction, expected", [
    (SortKey.SIZE, SortDirection.DESC, "Largest to Smallest"),
    (SortKey.SIZE, SortDirection.ASC, "Smallest to Largest"),
    (SortKey.MTIME, SortDirection.DESC, "Newest to Oldest"),
    (SortKey.MTIME, SortDirection.ASC, "Oldest to Newest"),
    (SortKey.NAME, SortDirection.DESC, "Z to A"),
    (SortKey.NAME, SortDirection.ASC, "A to Z"),
])
def test_direction_label(sort_by, direction, expected):
    assert direction_label(sort_by, direction) == expected


def test_sorted_message_name():
    assert sorted_message(SortKey.NAME, SortDirection.ASC) == "Sorted by name (A-Z)!"
