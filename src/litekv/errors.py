"""
Exception types raised by litekv.

Every error derives from LitekvError so callers can catch the whole family.
Most also derive from the closest builtin (ZeroDivisionError, TypeError,
ValueError) so generic handlers keep working.
"""

from __future__ import annotations

import typing as _typing


class LitekvError(Exception):
    """Base class for all litekv errors."""

    pass


class DivisionByZeroError(LitekvError, ZeroDivisionError):
    """Raised when a math operation divides by zero."""

    def __init__(self, operator: str, lhs: _typing.Any) -> None:
        self.operator = operator
        self.lhs = lhs
        verb = "Modulo" if operator == "%" else "Division"
        super().__init__(f"{verb} by zero is not allowed ({lhs!r} {operator} 0)")


class InvalidOperationError(LitekvError, ValueError):
    """Raised for an unknown operator or a result that is not a real number."""

    def __init__(self, operator: str, message: str | None = None) -> None:
        self.operator = operator
        super().__init__(message or f"Invalid operation: {operator!r}")


class NotNumericError(LitekvError, TypeError):
    """Raised when a value used in arithmetic is not a number."""

    def __init__(self, value: _typing.Any, key: str | None = None) -> None:
        self.value = value
        self.key = key
        where = f" at key {key!r}" if key is not None else ""
        super().__init__(f"Value{where} is not numeric: {value!r}")


class PathTypeMismatchError(LitekvError, TypeError):
    """Raised when writing below a path whose root is not a mapping."""

    def __init__(self, path: tuple[str, ...], actual: _typing.Any, key: str | None = None) -> None:
        self.path = path
        self.actual = actual
        self.key = key
        dotted = ".".join(path)
        where = f" of key {key!r}" if key is not None else ""
        super().__init__(
            f"Cannot write at path '{dotted}'{where}: "
            f"stored value is {type(actual).__name__}, not a mapping"
        )


class NotSequenceError(LitekvError, TypeError):
    """Raised when a list operation targets a value that is not a list."""

    def __init__(self, key: str, path: tuple[str, ...], actual: _typing.Any) -> None:
        self.key = key
        self.path = path
        self.actual = actual
        location = f"{key}.{'.'.join(path)}" if path else key
        kind = "missing" if actual is None else type(actual).__name__
        super().__init__(f"Value at '{location}' is not a sequence (got {kind})")


class ExhaustedRandomSpaceError(LitekvError):
    """Raised when autonum() cannot find a free key within its attempt budget."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"No unused key found after {attempts} attempts")


class StorageError(LitekvError):
    """Raised when the underlying store fails (I/O, permissions, corruption)."""

    pass


class InvalidTableNameError(LitekvError, ValueError):
    """Raised when a table name is not a plain SQL identifier."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Invalid table name: {name!r}. "
            "Table names must start with a letter or underscore and contain "
            "only letters, digits and underscores (max 64 chars)."
        )


class EncodeError(LitekvError, ValueError):
    """Raised when a value cannot be serialized for storage."""

    pass
