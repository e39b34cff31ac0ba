"""
Table factory.

Opens ValueStore tables from configuration, so callers do not have to wire
a row store, table defaults and autonum settings together by hand.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import litekv.config as config
import litekv.store as store
import litekv.value_store as value_store

_logger = _logging.getLogger(__name__)


def open_table(
    name: str | None = None,
    *,
    settings: config.Settings | None = None,
    db_path: str | _pathlib.Path | None = None,
) -> value_store.ValueStore:
    """
    Open a table in the configured SQLite database.

    Args:
        name: Table name. Defaults to database.default_table.
        settings: Settings to use. Loaded from the environment if None.
        db_path: Database file overriding database.path.

    Returns:
        A ValueStore over an SQLiteStore. Close it when done.

    Raises:
        InvalidTableNameError: If the table name is not a plain identifier.
        StorageError: If the database cannot be opened.
    """
    if settings is None:
        settings = config.Settings()

    table = name or settings.database.default_table
    path = str(db_path) if db_path is not None else settings.resolve_db_path()
    table_config = settings.table_config(table)

    _logger.debug("Opening table %s in %s", table, path)
    row_store = store.SQLiteStore(path, table, journal_mode=settings.database.journal_mode)
    return value_store.ValueStore(
        row_store,
        auto_ensure=table_config.auto_ensure,
        autonum_length=settings.autonum.length,
        autonum_max_attempts=settings.autonum.max_attempts,
    )


def open_memory_table(
    name: str = "data",
    *,
    auto_ensure: _typing.Any = None,
) -> value_store.ValueStore:
    """Open a throwaway table that lives only in memory."""
    return value_store.ValueStore(store.MemoryStore(name), auto_ensure=auto_ensure)
