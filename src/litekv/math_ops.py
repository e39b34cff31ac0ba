"""
Arithmetic on stored numbers.

Six binary operators are supported: + - * / % ^ (power). Division and
modulo by zero raise DivisionByZeroError. Results that are not finite real
numbers, or whose magnitude exceeds MAX_MAGNITUDE, raise
InvalidOperationError, so an invalid number never reaches storage.
"""

from __future__ import annotations

import math as _math
import sys as _sys
import typing as _typing

import litekv.codec as codec
import litekv.errors as errors

Number: _typing.TypeAlias = int | float

OPERATORS: tuple[str, ...] = ("+", "-", "*", "/", "%", "^")

# Largest magnitude a result may have; ints past it could not be stored as
# JSON numbers most readers accept
MAX_MAGNITUDE: float = _sys.float_info.max


def is_number(value: _typing.Any) -> bool:
    """Check for an int or float (bool excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_number(value: _typing.Any, key: str | None = None) -> Number:
    """
    Convert a stored value to a number for arithmetic.

    None (an absent or null field) counts as 0. Numeric strings left over
    from legacy rows are parsed. Everything else is rejected.

    Raises:
        NotNumericError: If the value cannot be used as a number.
    """
    if value is None:
        return 0
    if is_number(value):
        if isinstance(value, float) and not _math.isfinite(value):
            raise errors.NotNumericError(value, key)
        return _typing.cast(Number, value)
    if isinstance(value, str):
        parsed = codec.parse_number(value)
        if parsed is not None and _math.isfinite(parsed):
            return parsed
    raise errors.NotNumericError(value, key)


def _truncated_mod(lhs: Number, rhs: Number) -> Number:
    # Remainder takes the sign of the dividend
    if isinstance(lhs, int) and isinstance(rhs, int):
        remainder = abs(lhs) % abs(rhs)
        return -remainder if lhs < 0 else remainder
    return _math.fmod(lhs, rhs)


def _power_too_large(lhs: Number, rhs: Number) -> bool:
    # Decided from logarithms so a huge int ** int is never computed
    if not (isinstance(lhs, int) and isinstance(rhs, int)) or rhs <= 0 or abs(lhs) <= 1:
        return False
    return rhs > (_math.log2(MAX_MAGNITUDE) + 1) / _math.log2(abs(lhs))


def apply(op: str, lhs: Number, rhs: Number) -> Number:
    """
    Apply a binary operator.

    Args:
        op: One of OPERATORS.
        lhs: Left operand (the stored value).
        rhs: Right operand.

    Returns:
        The result.

    Raises:
        DivisionByZeroError: For / or % with rhs == 0, and for 0 ^ negative.
        InvalidOperationError: For an unknown operator, or a result that
            is complex, infinite, NaN or larger than MAX_MAGNITUDE.
    """
    if op not in OPERATORS:
        raise errors.InvalidOperationError(op)

    if op in ("/", "%") and rhs == 0:
        raise errors.DivisionByZeroError(op, lhs)

    overflow = f"Result of {lhs!r} {op} {rhs!r} overflows"
    if op == "^" and _power_too_large(lhs, rhs):
        raise errors.InvalidOperationError(op, overflow)

    try:
        if op == "+":
            result = lhs + rhs
        elif op == "-":
            result = lhs - rhs
        elif op == "*":
            result = lhs * rhs
        elif op == "/":
            result = lhs / rhs
        elif op == "%":
            result = _truncated_mod(lhs, rhs)
        else:
            result = lhs**rhs
    except ZeroDivisionError as e:
        raise errors.DivisionByZeroError(op, lhs) from e
    except OverflowError as e:
        raise errors.InvalidOperationError(op, overflow) from e

    if isinstance(result, complex) or (isinstance(result, float) and not _math.isfinite(result)):
        raise errors.InvalidOperationError(
            op, f"Result of {lhs!r} {op} {rhs!r} is not a finite real number"
        )
    if abs(result) > MAX_MAGNITUDE:
        raise errors.InvalidOperationError(op, overflow)
    return result
