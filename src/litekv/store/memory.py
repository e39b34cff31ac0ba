"""In-memory row store with the same semantics as SQLiteStore."""

from __future__ import annotations

import typing as _typing

import litekv.constants as constants
import litekv.store.base as base


class MemoryStore:
    """
    Dict-backed row store.

    Nothing is persisted. Scan order matches SQLiteStore: a rewritten key
    moves to the end.
    """

    def __init__(self, table: str = constants.DEFAULT_TABLE) -> None:
        self._table = base.validate_table_name(table)
        self._rows: dict[str, str] = {}

    @property
    def table(self) -> str:
        return self._table

    def get_row(self, key: str) -> base.Row | None:
        value = self._rows.get(key)
        return base.Row(key, value) if value is not None else None

    def put_row(self, key: str, value: str) -> None:
        self._rows.pop(key, None)
        self._rows[key] = value

    def delete_row(self, key: str) -> None:
        self._rows.pop(key, None)

    def count_rows(self, key: str | None = None) -> int:
        if key is None:
            return len(self._rows)
        return 1 if key in self._rows else 0

    def scan_rows(self) -> list[base.Row]:
        return [base.Row(key, value) for key, value in self._rows.items()]

    def close(self) -> None:
        pass

    def __enter__(self) -> MemoryStore:
        return self

    def __exit__(self, *exc_info: _typing.Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MemoryStore(table={self._table!r}, rows={len(self._rows)})"
