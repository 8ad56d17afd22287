"""Tests for loading the migration catalog."""

import pytest

from migration_sorter.core import (
    load_catalog, load_from_options, DirectoryNotFound, DirectoryUnreadable, LocalFileSystem, SorterOptions,
)


def test_loads_only_matching_extension(make_migrations):
    directory = make_migrations({
        "2024_01_01_000001_a.php": "<?php // a",
        "2024_01_01_000002_b.PHP": "<?php // b",
        "notes.txt": "not a migration",
    })

    entries = load_catalog(directory)

    assert sorted(e.name for e in entries) == ["2024_01_01_000001_a.php", "2024_01_01_000002_b.PHP"]


def test_entries_carry_size_and_mtime(make_migrations):
    directory = make_migrations({"2024_01_01_000001_a.php": ("12345", 1_650_000_000)})

    entry = load_catalog(directory)[0]

    assert entry.size == 5
    assert entry.mtime == 1_650_000_000
    assert entry.path == (directory / entry.name).resolve()


def test_hidden_files_skipped_unless_requested(make_migrations):
    directory = make_migrations({"a.php": "a", ".hidden.php": "h"})

    assert [e.name for e in load_catalog(directory)] == ["a.php"]
    assert sorted(e.name for e in load_catalog(directory, include_hidden=True)) == [".hidden.php", "a.php"]


def test_subdirectories_only_when_recursive(make_migrations):
    directory = make_migrations({"a.php": "a", "tenant/b.php": "b", ".git/c.php": "c"})

    assert [e.name for e in load_catalog(directory)] == ["a.php"]
    assert sorted(e.name for e in load_catalog(directory, recursive=True)) == ["a.php", "b.php"]


def test_empty_extension_matches_everything(make_migrations):
    directory = make_migrations({"a.php": "a", "b.sql": "b"})
    assert len(load_catalog(directory, extension="")) == 2
    assert [e.name for e in load_catalog(directory, extension="sql")] == ["b.sql"]


def test_empty_directory(tmp_path):
    assert load_catalog(tmp_path) == []


def test_missing_directory(tmp_path):
    with pytest.raises(DirectoryNotFound) as excinfo:
        load_catalog(tmp_path / "missing")
    assert "Directory not found" in str(excinfo.value)


def test_load_from_options(make_migrations, tmp_path, monkeypatch):
    make_migrations({"a.php": "a"})
    monkeypatch.chdir(tmp_path)

    entries = load_from_options(SorterOptions())

    assert [e.name for e in entries] == ["a.php"]


def test_unreadable_directory(make_migrations):
    class DeniedFS(LocalFileSystem):
        def list_files(self, directory, recursive=False):
            raise PermissionError(13, "Permission denied", str(directory))

    directory = make_migrations({"2024_01_01_000001_a.php": "a"})

    with pytest.raises(DirectoryUnreadable) as excinfo:
        load_catalog(directory, fs=DeniedFS())

    assert excinfo.value.path == directory.resolve()
    assert str(excinfo.value).endswith(": Permission denied")
