"""
migration_sorter - Interactive reordering of timestamp-prefixed migration files
"""

__version__ = "1.0.0"
