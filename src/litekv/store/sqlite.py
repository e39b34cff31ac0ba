"""
SQLite row store.

One table per store, two columns: `key TEXT PRIMARY KEY, value TEXT`.
Writes are upserts (INSERT OR REPLACE), so a rewritten key moves to the end
of the scan order.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import sqlite3 as _sqlite3
import typing as _typing

import litekv.constants as constants
import litekv.errors as errors
import litekv.store.base as base

_logger = _logging.getLogger(__name__)

JOURNAL_MODES = ("wal", "delete", "truncate", "persist", "memory", "off")

MEMORY_PATH = ":memory:"


class SQLiteStore:
    """
    Row store backed by a single SQLite table.

    The connection is opened on construction and kept until close(). Every
    write commits immediately; there are no multi-statement transactions.

    Args:
        path: Database file, or ":memory:" for a private in-memory database.
            Parent directories are created as needed.
        table: Table name. Must be a plain identifier.
        journal_mode: SQLite journal mode, one of JOURNAL_MODES.

    Raises:
        InvalidTableNameError: If table is not a plain identifier.
        ValueError: If journal_mode is unknown.
        StorageError: If the database cannot be opened or initialized.
    """

    def __init__(
        self,
        path: str | _pathlib.Path,
        table: str = constants.DEFAULT_TABLE,
        *,
        journal_mode: str = constants.DEFAULT_JOURNAL_MODE,
    ) -> None:
        self._table = base.validate_table_name(table)
        mode = journal_mode.lower()
        if mode not in JOURNAL_MODES:
            raise ValueError(
                f"Unknown journal mode: {journal_mode!r} (expected one of {', '.join(JOURNAL_MODES)})"
            )

        self._path = str(path)
        if self._path != MEMORY_PATH:
            try:
                _pathlib.Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise errors.StorageError(f"Cannot create directory for {self._path}: {e}") from e

        self._conn: _sqlite3.Connection | None = None
        try:
            self._conn = _sqlite3.connect(self._path)
            self._conn.execute(f"PRAGMA journal_mode={mode}")
            self._init_table()
        except _sqlite3.Error as e:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            raise errors.StorageError(f"Cannot open table {table!r} in {self._path}: {e}") from e

        _logger.debug("Opened table %s in %s (journal_mode=%s)", self._table, self._path, mode)

    def _init_table(self) -> None:
        with self._connection:
            self._connection.execute(
                f"CREATE TABLE IF NOT EXISTS {self._table} (key TEXT PRIMARY KEY, value TEXT)"
            )

    @property
    def _connection(self) -> _sqlite3.Connection:
        if self._conn is None:
            raise errors.StorageError(f"Store for table {self._table!r} is closed")
        return self._conn

    @property
    def table(self) -> str:
        """Name of the backing table."""
        return self._table

    @property
    def path(self) -> str:
        """Database path as given."""
        return self._path

    def get_row(self, key: str) -> base.Row | None:
        try:
            row = self._connection.execute(
                f"SELECT key, value FROM {self._table} WHERE key = ?", (key,)
            ).fetchone()
        except _sqlite3.Error as e:
            raise errors.StorageError(f"Failed to read key {key!r}: {e}") from e
        return base.Row(*row) if row is not None else None

    def put_row(self, key: str, value: str) -> None:
        try:
            with self._connection:
                self._connection.execute(
                    f"INSERT OR REPLACE INTO {self._table} (key, value) VALUES (?, ?)",
                    (key, value),
                )
        except _sqlite3.Error as e:
            raise errors.StorageError(f"Failed to write key {key!r}: {e}") from e

    def delete_row(self, key: str) -> None:
        try:
            with self._connection:
                self._connection.execute(f"DELETE FROM {self._table} WHERE key = ?", (key,))
        except _sqlite3.Error as e:
            raise errors.StorageError(f"Failed to delete key {key!r}: {e}") from e

    def count_rows(self, key: str | None = None) -> int:
        try:
            if key is None:
                row = self._connection.execute(f"SELECT COUNT(*) FROM {self._table}").fetchone()
            else:
                row = self._connection.execute(
                    f"SELECT COUNT(*) FROM {self._table} WHERE key = ?", (key,)
                ).fetchone()
        except _sqlite3.Error as e:
            raise errors.StorageError(f"Failed to count rows: {e}") from e
        return int(row[0])

    def scan_rows(self) -> list[base.Row]:
        try:
            rows = self._connection.execute(
                f"SELECT key, value FROM {self._table} ORDER BY rowid"
            ).fetchall()
        except _sqlite3.Error as e:
            raise errors.StorageError(f"Failed to scan table {self._table!r}: {e}") from e
        return [base.Row(*row) for row in rows]

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SQLiteStore:
        return self

    def __exit__(self, *exc_info: _typing.Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SQLiteStore(path={self._path!r}, table={self._table!r})"
