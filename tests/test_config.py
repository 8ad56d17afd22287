"""Tests for configuration loading and logging setup."""

import logging
from pathlib import Path

import pytest

from migration_sorter.core import SorterOptions, configure_logging, load_options
from migration_sorter.core.config import find_config_file, options_from_table


def test_no_config_gives_defaults(tmp_path):
    assert find_config_file(tmp_path) is None
    assert load_options(cwd=tmp_path) == SorterOptions()


def test_dedicated_file(tmp_path):
    (tmp_path / ".migration-sorter.toml").write_text(
        'directory = "db/migrations"\n'
        'backup-root = "var/backups"\n'
        'input-mode = "line"\n'
        'message_delay = 0.25\n',
        encoding="utf-8",
    )

    options = load_options(cwd=tmp_path)

    assert options.directory == Path("db/migrations")
    assert options.backup_root == Path("var/backups")
    assert options.input_mode == "line"
    assert options.message_delay == 0.25
    assert options.extension == ".php"


def test_pyproject_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "app"\n\n[tool.migration-sorter]\nextension = "sql"\nrecursive = true\n',
        encoding="utf-8",
    )

    assert find_config_file(tmp_path) == (tmp_path / "pyproject.toml", True)
    options = load_options(cwd=tmp_path)
    assert options.extension == ".sql"
    assert options.recursive is True


def test_pyproject_without_table_ignored(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "app"\n', encoding="utf-8")
    assert find_config_file(tmp_path) is None


def test_dedicated_file_wins_over_pyproject(tmp_path):
    (tmp_path / ".migration-sorter.toml").write_text('extension = ".py"\n', encoding="utf-8")
    (tmp_path / "pyproject.toml").write_text('[tool.migration-sorter]\nextension = ".sql"\n', encoding="utf-8")

    assert load_options(cwd=tmp_path).extension == ".py"


def test_explicit_file(tmp_path):
    path = tmp_path / "sorter.toml"
    path.write_text('dry-run = true\n', encoding="utf-8")

    assert load_options(path).dry_run is True


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="Unknown configuration key: colour"):
        options_from_table({"colour": "blue"})


def test_invalid_input_mode_rejected():
    with pytest.raises(ValueError, match="Unknown input mode"):
        options_from_table({"input-mode": "mouse"})


def test_configure_logging_console_level():
    logger = configure_logging()
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.WARNING

    logger = configure_logging(verbose=True)
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.DEBUG


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "sorter.log"
    logger = configure_logging(log_file=log_file)

    logging.getLogger("migration_sorter.core.scan_files").info("Loaded 3 migration files")
    for handler in logger.handlers:
        handler.flush()

    assert "Loaded 3 migration files" in log_file.read_text(encoding="utf-8")


@pytest.mark.parametrize("table, message", [
    ({"directory": 5}, "directory: expected str, got int"),
    ({"recursive": "yes"}, "recursive: expected bool, got str"),
    ({"name-width": 60.5}, "name-width: expected int, got float"),
    ({"message_delay": True}, "message_delay: expected int or float, got bool"),
])
def test_wrong_value_type_rejected(table, message):
    with pytest.raises(ValueError, match=f"Invalid value for configuration key {message}"):
        options_from_table(table)


def test_integer_delay_accepted():
    assert options_from_table({"idle-delay": 0}).idle_delay == 0
