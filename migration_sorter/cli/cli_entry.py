"""
cli_entry.py - CLI Entry Point

Parses arguments, loads the migration files and runs the interactive sorter
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from ..core import (
    AlwaysConfirm, Clock, DirectoryNotFound, DirectoryUnreadable, FileSystem, OrderState,
    RegenerationEngine, SorterOptions, UserPrompt, configure_logging, load_from_options, load_options,
)
from ..core.ports import Terminal
from .cli_interactive import SessionOutcome, SortingSession, progress_printer
from .cli_keys import create_controller
from .cli_terminal import ConsolePrompt, ConsoleTerminal

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="rearrange-migrations",
        description="Interactive migration file sorting: reorder the files, then rewrite their timestamps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sort database/migrations of the current project
  rearrange-migrations

  # Another directory and extension, typed commands instead of keystrokes
  rearrange-migrations ./migrations --extension .py --input line

  # Show the new names without changing anything
  rearrange-migrations --dry-run
"""
    )

    parser.add_argument("directory", nargs="?", type=str, default=None,
                        help="Migrations directory (default: database/migrations)")
    parser.add_argument("--extension", "-e", type=str, default=None,
                        help="Migration file extension (default: .php)")
    parser.add_argument("--recursive", action="store_true", default=None,
                        help="Also sort files in subdirectories")
    parser.add_argument("--include-hidden", action="store_true", default=None,
                        help="Include hidden files")
    parser.add_argument("--backup-dir", "-b", type=str, default=None,
                        help="Backup root (default: storage/app/migration_backups)")
    parser.add_argument("--input", choices=["auto", "raw", "line"], default=None,
                        help="Keystroke input (raw), typed commands (line) or detect (auto)")
    parser.add_argument("--message-delay", type=float, default=None,
                        help="Seconds to show status messages")
    parser.add_argument("--dry-run", "-d", action="store_true", default=None,
                        help="Preview only, do not execute")
    parser.add_argument("--yes", "-y", action="store_true", default=None,
                        help="Skip confirmation")
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Configuration file (TOML)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show debug logging")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Write a rotating log file")

    return parser


def options_from_args(args: argparse.Namespace, cwd: Optional[Path] = None) -> SorterOptions:
    """Configuration file values overridden by command-line flags"""
    options = load_options(Path(args.config) if args.config else None, cwd=cwd)

    overrides = {
        "directory": Path(args.directory) if args.directory else None,
        "extension": args.extension,
        "recursive": args.recursive,
        "include_hidden": args.include_hidden,
        "backup_root": Path(args.backup_dir) if args.backup_dir else None,
        "input_mode": args.input,
        "message_delay": args.message_delay,
        "dry_run": args.dry_run,
        "assume_yes": args.yes,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return replace(options, **overrides)


def run_sorter(
    options: SorterOptions,
    terminal: Optional[Terminal] = None,
    prompt: Optional[UserPrompt] = None,
    clock: Optional[Clock] = None,
    fs: Optional[FileSystem] = None,
    cwd: Optional[Path] = None,
) -> int:
    """
    Load the migration files and run the interactive session

    Returns:
        Exit code (0 finished/quit/cancelled, 1 missing or unreadable directory, no files or failure)
    """
    terminal = terminal or ConsoleTerminal()
    directory = options.resolved_directory(cwd)
    terminal.print(f"Scanning Directory: {directory}")

    try:
        entries = load_from_options(replace(options, directory=directory), fs=fs)
    except (DirectoryNotFound, DirectoryUnreadable) as e:
        logger.error("%s", e)
        terminal.print(f"Error: {e}")
        return 1

    if not entries:
        terminal.print(f"No migration files found in '{directory}'")
        if options.extension == ".php":
            terminal.print("Try creating some migration files first with: php artisan make:migration")
        return 1

    terminal.print(f"Found {len(entries)} migration files")

    if prompt is None:
        prompt = AlwaysConfirm() if options.assume_yes else ConsolePrompt(terminal)

    engine = RegenerationEngine(
        directory,
        options.resolved_backup_root(cwd),
        fs=fs,
        clock=clock,
        prompt=prompt,
        dry_run=options.dry_run,
        progress_callback=progress_printer(terminal),
    )
    controller = create_controller(terminal, options.input_mode)
    session = SortingSession(OrderState(entries), terminal, controller, engine, options)

    outcome = session.run()
    return 1 if outcome == SessionOutcome.FAILED else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, log_file=Path(args.log_file) if args.log_file else None)

    try:
        options = options_from_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    try:
        return run_sorter(options)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
