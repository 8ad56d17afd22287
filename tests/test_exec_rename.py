"""Tests for backup and timestamp regeneration."""

import json
from pathlib import Path

import pytest

from migration_sorter.core import (
    LocalFileSystem, RegenerationEngine, RegenerationPhase,
    PlanValidationError, BackupWriteFailure, RenameFailure,
    load_catalog,
)
from migration_sorter.core.exec_rename import (
    CONFIRM_QUESTION, MANIFEST_NAME, create_backup_directory,
)
from mocks import ScriptedPrompt


FILES = {
    "2024_01_01_000001_create_users_table.php": "<?php // users",
    "2024_01_01_000002_create_posts_table.php": "<?php // posts",
    "2024_01_01_000003_add_index.php": "<?php // index",
}


@pytest.fixture
def migrations(make_migrations):
    return make_migrations(FILES)


@pytest.fixture
def backup_root(tmp_path):
    return tmp_path / "storage" / "app" / "migration_backups"


def ordered(directory, names):
    entries = {e.name: e for e in load_catalog(directory)}
    return [entries[name] for name in names]


class FailingFS(LocalFileSystem):
    """LocalFileSystem that raises on the n-th call of one operation"""

    def __init__(self, operation, fail_on=1):
        self.operation = operation
        self.fail_on = fail_on
        self.calls = 0

    def _maybe_fail(self, operation):
        if operation == self.operation:
            self.calls += 1
            if self.calls == self.fail_on:
                raise OSError(f"simulated {operation} failure")

    def copy(self, src, dst):
        self._maybe_fail("copy")
        super().copy(src, dst)

    def write_all(self, path, content):
        self._maybe_fail("manifest" if Path(path).name == MANIFEST_NAME else "write")
        super().write_all(path, content)

    def list_files(self, directory, recursive=False):
        self._maybe_fail("list")
        return super().list_files(directory, recursive)


class CrowdedFS(LocalFileSystem):
    """Every backup directory name is already taken"""

    def exists(self, path):
        return "migration_backups" in Path(path).parts or super().exists(path)


def test_regenerates_in_final_order(migrations, backup_root, clock):
    order = [
        "2024_01_01_000003_add_index.php",
        "2024_01_01_000001_create_users_table.php",
        "2024_01_01_000002_create_posts_table.php",
    ]
    prompt = ScriptedPrompt(True)
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=prompt)

    result = engine.finalize(ordered(migrations, order))

    assert engine.phase == RegenerationPhase.DONE
    assert prompt.questions == [CONFIRM_QUESTION]
    assert result.success_count == 3
    assert sorted(p.name for p in migrations.iterdir()) == [
        "2025_03_04_102030_add_index.php",
        "2025_03_04_102031_create_users_table.php",
        "2025_03_04_102032_create_posts_table.php",
    ]
    assert (migrations / "2025_03_04_102031_create_users_table.php").read_text() == "<?php // users"


def test_backup_holds_identical_originals(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=ScriptedPrompt(True))

    result = engine.finalize(load_catalog(migrations))

    assert result.backup_dir == backup_root / "2025-03-04_10-20-30"
    for name, content in FILES.items():
        assert (result.backup_dir / name).read_text() == content
    assert "Backup of original files saved to" in result.summary()


def test_manifest_lists_operations(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=ScriptedPrompt(True))

    result = engine.finalize(load_catalog(migrations))
    manifest = json.loads((result.backup_dir / MANIFEST_NAME).read_text(encoding="utf-8"))

    assert manifest["base_timestamp"] == "2025_03_04_102030"
    assert manifest["total_files"] == 3
    assert [Path(op["dst"]).name[:17] for op in manifest["operations"]] == [
        "2025_03_04_102030", "2025_03_04_102031", "2025_03_04_102032",
    ]


def test_declined_confirmation_touches_nothing(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=ScriptedPrompt(False))

    result = engine.finalize(load_catalog(migrations))

    assert result.cancelled
    assert result.summary() == "Migration regeneration cancelled."
    assert engine.phase == RegenerationPhase.CANCELLED
    assert not backup_root.exists()
    assert sorted(p.name for p in migrations.iterdir()) == sorted(FILES)


def test_dry_run_touches_nothing(migrations, backup_root, clock):
    prompt = ScriptedPrompt()
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=prompt, dry_run=True)

    result = engine.finalize(load_catalog(migrations))

    assert result.dry_run
    assert prompt.questions == []
    assert result.plan.total_count == 3
    assert "[Preview mode]" in result.summary()
    assert not backup_root.exists()
    assert sorted(p.name for p in migrations.iterdir()) == sorted(FILES)


def test_second_backup_in_same_second_gets_suffix(backup_root, clock):
    fs = LocalFileSystem()
    first = create_backup_directory(backup_root, clock.now(), fs)
    second = create_backup_directory(backup_root, clock.now(), fs)

    assert first.name == "2025-03-04_10-20-30"
    assert second.name == "2025-03-04_10-20-30_1"


def test_foreign_destination_aborts_before_backup(make_migrations, backup_root, clock):
    migrations = make_migrations({
        "2024_01_01_000001_a.php": "a",
    })
    (migrations / "2025_03_04_102030_a.php").write_text("someone else")
    entries = [e for e in load_catalog(migrations) if e.name == "2024_01_01_000001_a.php"]
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=ScriptedPrompt(True))

    with pytest.raises(PlanValidationError) as excinfo:
        engine.finalize(entries)

    assert "Destination already exists" in excinfo.value.errors[0]
    assert engine.phase == RegenerationPhase.FAILED
    assert not backup_root.exists()
    assert (migrations / "2025_03_04_102030_a.php").read_text() == "someone else"


def test_backup_failure_leaves_migrations_untouched(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, fs=FailingFS("copy", fail_on=2),
                                clock=clock, prompt=ScriptedPrompt(True))

    with pytest.raises(BackupWriteFailure) as excinfo:
        engine.finalize(load_catalog(migrations))

    assert excinfo.value.step == "backup"
    assert engine.phase == RegenerationPhase.FAILED
    assert sorted(p.name for p in migrations.iterdir()) == sorted(FILES)


def test_manifest_failure_reports_backup_location(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, fs=FailingFS("manifest"),
                                clock=clock, prompt=ScriptedPrompt(True))

    with pytest.raises(BackupWriteFailure) as excinfo:
        engine.finalize(load_catalog(migrations))

    error = excinfo.value
    backup_dir = backup_root / "2025-03-04_10-20-30"
    assert error.step == "backup"
    assert error.backup_dir == backup_dir
    assert error.path == backup_dir / MANIFEST_NAME
    assert str(backup_dir) in error.report()
    assert engine.phase == RegenerationPhase.FAILED
    assert sorted(p.name for p in migrations.iterdir()) == sorted(FILES)


def test_exhausted_backup_names_reported(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, fs=CrowdedFS(),
                                clock=clock, prompt=ScriptedPrompt(True))

    with pytest.raises(BackupWriteFailure) as excinfo:
        engine.finalize(load_catalog(migrations))

    assert "Cannot create backup directory" in excinfo.value.report()
    assert engine.phase == RegenerationPhase.FAILED
    assert sorted(p.name for p in migrations.iterdir()) == sorted(FILES)


def test_rename_failure_reports_progress(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, fs=FailingFS("write", fail_on=2),
                                clock=clock, prompt=ScriptedPrompt(True))

    with pytest.raises(RenameFailure) as excinfo:
        engine.finalize(load_catalog(migrations))

    error = excinfo.value
    assert error.step == "write"
    assert len(error.completed) == 1
    assert error.backup_dir == backup_root / "2025-03-04_10-20-30"
    report = error.report()
    assert "Failed to regenerate migration files (write)" in report
    assert "Already renamed: 1" in report
    assert str(error.backup_dir) in report
    # Every original is still recoverable from the backup
    assert sorted(p.name for p in error.backup_dir.iterdir()) == sorted(FILES) + [MANIFEST_NAME]


def test_engine_cannot_run_twice(migrations, backup_root, clock):
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=ScriptedPrompt(True))
    engine.finalize(load_catalog(migrations))

    with pytest.raises(RuntimeError):
        engine.finalize(load_catalog(migrations))


def test_progress_callback(migrations, backup_root, clock):
    events = []
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=ScriptedPrompt(True),
                                progress_callback=lambda c, t, m: events.append((c, t, m)))

    engine.finalize(load_catalog(migrations))

    assert len(events) == 6
    assert events[0][2].startswith("Backing up ")
    assert events[-1][:2] == (3, 3)
    assert " -> 2025_03_04_10203" in events[-1][2]


def test_recursive_backup_keeps_relative_paths(make_migrations, backup_root, clock):
    migrations = make_migrations({
        "2024_01_01_000001_a.php": "a",
        "tenant/2024_01_01_000002_b.php": "b",
    })
    entries = load_catalog(migrations, recursive=True)
    engine = RegenerationEngine(migrations, backup_root, clock=clock, prompt=ScriptedPrompt(True))

    result = engine.finalize(entries)

    assert (result.backup_dir / "tenant" / "2024_01_01_000002_b.php").read_text() == "b"
    assert len(list((migrations / "tenant").iterdir())) == 1
    assert next((migrations / "tenant").iterdir()).name.endswith("_b.php")
