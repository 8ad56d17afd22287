#!/usr/bin/env python3
"""
Migration Sorter - Main Entry

Supports:
- Terminal mode (default startup)
- GUI mode (--gui or -g parameter)

Usage:
    rearrange-migrations                        # Terminal mode, database/migrations
    rearrange-migrations ./migrations --input line
    rearrange-migrations --gui                  # GUI mode
    python -m migration_sorter.main -g ./database/migrations
"""

import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    argv = list(sys.argv[1:] if argv is None else argv)

    # Check if GUI should be started
    if "--gui" in argv or "-g" in argv:
        argv = [arg for arg in argv if arg not in ("--gui", "-g")]

        try:
            from .gui import main as gui_main
        except ImportError as e:
            print(f"Error: Unable to start GUI, please ensure PySide6 is installed")
            print(f"Detailed error: {e}")
            print("\nInstall command: pip install 'migration-sorter[gui]'")
            print("\nTo use terminal mode, run:")
            print("    rearrange-migrations")
            return 1
        return gui_main(argv)

    # Default to terminal mode
    from .cli import main as cli_main
    return cli_main(argv)


if __name__ == "__main__":
    sys.exit(main())
