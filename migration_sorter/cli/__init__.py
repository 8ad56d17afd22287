"""
cli - Command Line Interface for the Migration Sorter
"""

from .cli_entry import main, run_sorter
from .cli_interactive import SortingSession, SessionOutcome

__all__ = ["main", "run_sorter", "SortingSession", "SessionOutcome"]
