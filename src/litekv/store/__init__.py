"""
Row stores for litekv.

A store persists (key, text) rows; ValueStore layers JSON values, dotted
paths and arithmetic on top.
"""

from litekv.store.base import Row, Store, validate_table_name
from litekv.store.memory import MemoryStore
from litekv.store.sqlite import JOURNAL_MODES, SQLiteStore

__all__ = [
    "JOURNAL_MODES",
    "MemoryStore",
    "Row",
    "SQLiteStore",
    "Store",
    "validate_table_name",
]
