"""
Conversion between stored text and in-memory values.

Values are stored as JSON text. Decoding is lenient: rows written by older
tools may hold a bare number or plain text instead of JSON, so anything
that fails to parse is returned as a number (when it is a decimal numeral)
or as the original string. Decoding never raises.
"""

from __future__ import annotations

import json as _json
import math as _math
import re as _re
import typing as _typing

import litekv.errors as errors

JSONValue: _typing.TypeAlias = (
    None | bool | int | float | str | list["JSONValue"] | dict[str, "JSONValue"]
)

_NUMERAL = _re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")
_INTEGER = _re.compile(r"^[+-]?[0-9]+$")


def _reject_constant(name: str) -> _typing.NoReturn:
    # json accepts NaN/Infinity by default; those are not valid stored values
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    # 1e400 parses to inf, which could never be written back
    value = float(text)
    if not _math.isfinite(value):
        raise ValueError(f"number out of range: {text}")
    return value


def encode(value: _typing.Any) -> str:
    """
    Serialize a value for storage.

    Args:
        value: Any JSON-compatible value.

    Returns:
        Compact JSON text. None encodes to the literal "null".

    Raises:
        EncodeError: If the value is not JSON-serializable (including NaN
            and infinities).
    """
    if value is None:
        return "null"
    try:
        return _json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise errors.EncodeError(f"Cannot encode value of type {type(value).__name__}: {e}") from e


def parse_number(text: str) -> int | float | None:
    """
    Parse text as a decimal numeral.

    Returns:
        An int for integer notation, else a float. None if text is not a
        numeral, or is one too large to store (infinite as a float, or
        past the int conversion limit).
    """
    stripped = text.strip()
    if not _NUMERAL.match(stripped):
        return None
    try:
        if _INTEGER.match(stripped):
            return int(stripped)
        return _finite_float(stripped)
    except ValueError:
        return None


def decode(text: str) -> JSONValue:
    """
    Deserialize stored text.

    Tries JSON first, then a bare decimal numeral, then gives back the text
    itself.
    """
    try:
        document = _json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
        return _typing.cast(JSONValue, document)
    except ValueError:
        pass

    number = parse_number(text)
    if number is not None:
        return number
    return text
