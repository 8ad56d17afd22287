"""
gui - PySide6 front end for the Migration Sorter
"""

from .gui_entry import main
from .gui_mainwindow import SorterWindow

__all__ = ["main", "SorterWindow"]
