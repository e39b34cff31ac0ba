"""
Row-level storage contract.

A Store persists (key, text) rows in a single table and knows nothing about
the values' structure. ValueStore builds document semantics on top of it.
"""

from __future__ import annotations

import re as _re
import typing as _typing

import litekv.constants as constants
import litekv.errors as errors

_TABLE_NAME = _re.compile(constants.TABLE_NAME_PATTERN)


class Row(_typing.NamedTuple):
    """A stored row: the key and the encoded value text."""

    key: str
    value: str


@_typing.runtime_checkable
class Store(_typing.Protocol):
    """Protocol implemented by all row stores."""

    @property
    def table(self) -> str:
        """Name of the table this store reads and writes."""
        ...

    def get_row(self, key: str) -> Row | None:
        """Return the row for key, or None if absent."""
        ...

    def put_row(self, key: str, value: str) -> None:
        """Insert or replace the row for key."""
        ...

    def delete_row(self, key: str) -> None:
        """Delete the row for key. Deleting an absent key is not an error."""
        ...

    def count_rows(self, key: str | None = None) -> int:
        """Count all rows, or the rows matching key."""
        ...

    def scan_rows(self) -> list[Row]:
        """Return all rows, least recently written first."""
        ...

    def close(self) -> None:
        """Release any resources held by the store."""
        ...


def validate_table_name(name: str) -> str:
    """Validate a table name for safe interpolation into SQL.

    Args:
        name: The table name to validate.

    Returns:
        The validated name (unchanged if valid).

    Raises:
        InvalidTableNameError: If the name is not a plain identifier.
    """
    if not isinstance(name, str) or not _TABLE_NAME.fullmatch(name):
        raise errors.InvalidTableNameError(name)
    return name
