"""
gui_entry.py - GUI Entry

Launch PySide6 GUI application
"""

import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from ..cli.cli_entry import create_parser, options_from_args
from ..core import configure_logging
from .gui_mainwindow import SorterWindow


def main(argv: Optional[List[str]] = None):
    """GUI main entry (accepts the same options as the terminal sorter)"""
    args = create_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)
    try:
        options = options_from_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Migration Sorter")
    app.setApplicationVersion("1.0.0")

    # Set style
    app.setStyle("Fusion")

    window = SorterWindow(options)
    window.show()
    if options.resolved_directory().is_dir():
        window.load_directory(options.resolved_directory())

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
