"""
Document-style access to a key-value table.

ValueStore turns a row store into a store of JSON values addressed by key,
with dotted paths into nested mappings, a table-wide default merged under
existing records, list helpers and arithmetic.

Every operation is a self-contained read-modify-write against the store.
Nothing is atomic across those steps: callers that share a table between
writers must serialize access themselves.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import logging as _logging
import random as _random
import typing as _typing

import litekv.codec as codec
import litekv.constants as constants
import litekv.errors as errors
import litekv.math_ops as math_ops
import litekv.merge as merge
import litekv.paths as paths
import litekv.store as store
import litekv.tokens as tokens

_logger = _logging.getLogger(__name__)

Predicate: _typing.TypeAlias = _abc.Callable[[_typing.Any, str], bool]


def _json_equal(a: _typing.Any, b: _typing.Any) -> bool:
    """Equality between JSON values that keeps booleans apart from numbers."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if math_ops.is_number(a) and math_ops.is_number(b):
        return a == b
    if isinstance(a, list) and isinstance(b, list):
        return len(a) == len(b) and all(_json_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(_json_equal(a[k], b[k]) for k in a)
    return type(a) is type(b) and a == b


class ValueStore:
    """
    A table of JSON values.

    Example:
        >>> table = ValueStore(store.MemoryStore(), auto_ensure={"coins": 0})
        >>> table.set("alice", "Alice", "profile.name")
        {'coins': 0, 'profile': {'name': 'Alice'}}
        >>> table.inc("alice", "coins")
        1
        >>> table.get("alice", "profile.name")
        'Alice'

    Args:
        row_store: Where rows are persisted.
        auto_ensure: Default value merged under every record that is
            created or ensured. None means no default.
        autonum_length: Length of keys generated by autonum().
        autonum_max_attempts: Collisions tolerated by autonum().
    """

    def __init__(
        self,
        row_store: store.Store,
        *,
        auto_ensure: _typing.Any = None,
        autonum_length: int = constants.DEFAULT_AUTONUM_LENGTH,
        autonum_max_attempts: int = constants.DEFAULT_AUTONUM_MAX_ATTEMPTS,
    ) -> None:
        if autonum_max_attempts < 1:
            raise ValueError(f"autonum_max_attempts must be at least 1, got {autonum_max_attempts}")
        # Fail fast on a default that could never be stored
        codec.encode(auto_ensure)

        self._store = row_store
        self._auto_ensure = _copy.deepcopy(auto_ensure)
        self._autonum_length = autonum_length
        self._autonum_max_attempts = autonum_max_attempts

    @property
    def name(self) -> str:
        """Name of the underlying table."""
        return self._store.table

    @property
    def row_store(self) -> store.Store:
        """The underlying row store."""
        return self._store

    @property
    def auto_ensure(self) -> _typing.Any:
        """A copy of the configured default value."""
        return _copy.deepcopy(self._auto_ensure)

    # =========================================================================
    # Internal read/write
    # =========================================================================

    def _read(self, key: str) -> _typing.Any:
        """Decoded value for key, or MISSING if there is no row."""
        row = self._store.get_row(key)
        if row is None:
            return paths.MISSING
        return codec.decode(row.value)

    def _write(self, key: str, value: _typing.Any) -> _typing.Any:
        text = codec.encode(value)
        self._store.put_row(key, text)
        _logger.debug("Wrote %s[%r] (%d chars)", self.name, key, len(text))
        return value

    # =========================================================================
    # Basic access
    # =========================================================================

    def get(self, key: str, path: paths.PathLike = None) -> _typing.Any:
        """
        Get the value for key, or the field at path inside it.

        Returns:
            The stored value, or None if the key or any path segment is
            absent.
        """
        value = self._read(key)
        if value is paths.MISSING:
            return None
        return paths.read_at(value, path)

    def set(self, key: str, value: _typing.Any, path: paths.PathLike = None) -> _typing.Any:
        """
        Store value under key, or at path inside the stored mapping.

        With a path, only the addressed field changes; sibling fields are
        kept and missing levels are created.

        Returns:
            The full value written for key.

        Raises:
            PathTypeMismatchError: If path is given and the stored value is
                not a mapping. Nothing is written.
            EncodeError: If the value is not JSON-serializable.
        """
        segments = paths.split_path(path)
        # Validate before ensure() can write anything
        codec.encode(value)

        current = self.get(key)
        if segments:
            # A missing record would be created from the default
            target = current if current is not None else self._auto_ensure
            if target is not None and not isinstance(target, dict):
                raise errors.PathTypeMismatchError(segments, target, key)
        if current is None:
            current = self.ensure(key)

        if segments:
            value = merge.merge(current, paths.build_skeleton(segments, value))

        return self._write(key, value)

    def ensure(self, key: str) -> _typing.Any:
        """
        Make sure key holds at least the table default.

        An absent (or null) record is created from the default. An existing
        record has the default merged under it, so fields added to the
        default later are backfilled while stored values win. The result is
        written back on every call.

        Returns:
            The value now stored for key.
        """
        existing = self.get(key)
        if existing is None:
            return self._write(key, _copy.deepcopy(self._auto_ensure))
        return self._write(key, merge.merge(self._auto_ensure, existing))

    def delete(self, key: str) -> None:
        """Delete key. Deleting an absent key is not an error."""
        self._store.delete_row(key)
        _logger.debug("Deleted %s[%r]", self.name, key)

    def has(self, key: str) -> bool:
        """Check whether a record exists for key."""
        return self._store.count_rows(key) > 0

    def autonum(self) -> str:
        """
        Generate a random key that is not yet used in this table.

        The key is not reserved: it stays free until something is set
        under it.

        Raises:
            ExhaustedRandomSpaceError: If every attempt collided.
        """
        for attempt in range(1, self._autonum_max_attempts + 1):
            candidate = tokens.generate_token(self._autonum_length)
            if not self.has(candidate):
                return candidate
            _logger.warning(
                "autonum collision on %s (attempt %d/%d)",
                self.name,
                attempt,
                self._autonum_max_attempts,
            )
        raise errors.ExhaustedRandomSpaceError(self._autonum_max_attempts)

    # =========================================================================
    # Lists
    # =========================================================================

    def push(self, key: str, value: _typing.Any, path: paths.PathLike = None) -> list[_typing.Any]:
        """
        Append value to the list stored at key (or at path inside it).

        A missing list is created. For an absent record the list starts
        from the table default, as set() would create it.

        Returns:
            The list after appending.

        Raises:
            NotSequenceError: If the current value exists and is not a list.
        """
        segments = paths.split_path(path)
        record = self.get(key)
        if record is None:
            # set() will create the record from the defaults, so start from them
            record = self.auto_ensure
        current = paths.read_at(record, segments)
        if current is None:
            current = []
        elif not isinstance(current, list):
            raise errors.NotSequenceError(key, segments, current)

        current.append(value)
        self.set(key, current, segments)
        return current

    def includes(self, key: str, value: _typing.Any, path: paths.PathLike = None) -> bool:
        """
        Check whether the list (or string) at key/path contains value.

        List items compare as JSON values: true is not 1, while 1 and 1.0
        are the same number. For strings this is a substring test.

        Raises:
            NotSequenceError: If the value is missing or is neither a list
                nor a string.
        """
        segments = paths.split_path(path)
        current = self.get(key, segments)
        if isinstance(current, list):
            return any(_json_equal(item, value) for item in current)
        if isinstance(current, str):
            return isinstance(value, str) and value in current
        raise errors.NotSequenceError(key, segments, current)

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def math(
        self,
        key: str,
        operation: str,
        operand: _typing.Any,
        path: paths.PathLike = None,
    ) -> math_ops.Number:
        """
        Apply an arithmetic operation to the number at key (or path).

        A missing or null value counts as 0, so `math(k, "+", 5)` on a new
        key stores 5. For an absent record the table default is read
        instead, matching what set() would create.

        Args:
            key: Record key.
            operation: One of + - * / % ^.
            operand: Right-hand number.
            path: Optional field path inside the record.

        Returns:
            The new value.

        Raises:
            DivisionByZeroError: For / or % by zero.
            InvalidOperationError: For an unknown operator or a non-real
                result.
            NotNumericError: If the stored value or operand is not numeric.

        On any error nothing is written.
        """
        segments = paths.split_path(path)
        if not math_ops.is_number(operand):
            raise errors.NotNumericError(operand)

        record = self.get(key)
        if record is None:
            # The record set() would create, so defaults count as the start value
            record = self._auto_ensure
        current = math_ops.coerce_number(paths.read_at(record, segments), key)
        result = math_ops.apply(operation, current, operand)
        self.set(key, result, segments)
        return result

    def inc(self, key: str, path: paths.PathLike = None) -> math_ops.Number:
        """Add 1 to the number at key (or path). Returns the new value."""
        return self.math(key, "+", 1, path)

    def dec(self, key: str, path: paths.PathLike = None) -> math_ops.Number:
        """Subtract 1 from the number at key (or path). Returns the new value."""
        return self.math(key, "-", 1, path)

    # =========================================================================
    # Whole-table queries
    # =========================================================================

    def get_all(self) -> dict[str, _typing.Any]:
        """Return every record, least recently written first."""
        return {row.key: codec.decode(row.value) for row in self._store.scan_rows()}

    def filter(self, predicate: Predicate) -> dict[str, _typing.Any]:
        """Return the records for which predicate(value, key) is true."""
        return {key: value for key, value in self.get_all().items() if predicate(value, key)}

    def find_key(self, predicate: Predicate) -> str | None:
        """Return the first key whose record matches predicate, or None."""
        for key in self.filter(predicate):
            return key
        return None

    def find(self, predicate: Predicate) -> _typing.Any:
        """Return the first record matching predicate, or None."""
        for value in self.filter(predicate).values():
            return value
        return None

    def random(self) -> _typing.Any:
        """Return a uniformly chosen record, or None if the table is empty."""
        records = self.get_all()
        if not records:
            return None
        return records[_random.choice(list(records))]

    def key_array(self) -> list[str]:
        """Return every key."""
        return list(self.get_all())

    def length(self) -> int:
        """Return the number of records."""
        return self._store.count_rows()

    # =========================================================================
    # Protocol support
    # =========================================================================

    def __len__(self) -> int:
        return self.length()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def close(self) -> None:
        """Close the underlying store."""
        self._store.close()

    def __enter__(self) -> ValueStore:
        return self

    def __exit__(self, *exc_info: _typing.Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ValueStore({self._store!r})"
