"""
Dotted-path navigation into nested mappings.

A path such as "profile.address.city" addresses a field inside a stored
mapping, one segment per level. The empty path addresses the whole value.

All functions here are pure: inputs are never mutated.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import typing as _typing

import litekv.constants as constants
import litekv.errors as errors

Path: _typing.TypeAlias = tuple[str, ...]

PathLike: _typing.TypeAlias = str | _abc.Sequence[str] | None


class _MissingType:
    """Sentinel type marking an absent value (distinct from a stored null)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False


MISSING: _typing.Final = _MissingType()


def split_path(path: PathLike) -> Path:
    """
    Normalize a path to a tuple of segments.

    Args:
        path: Dotted string ("a.b"), sequence of segments, or None.

    Returns:
        Tuple of segments. None and "" give the empty path.

    Raises:
        TypeError: If a segment is not a string.
    """
    if path is None or path == "":
        return ()
    if isinstance(path, str):
        return tuple(path.split(constants.PATH_SEPARATOR))

    segments = tuple(path)
    for segment in segments:
        if not isinstance(segment, str):
            raise TypeError(f"Path segments must be strings, got {type(segment).__name__}")
    return segments


def read_at(root: _typing.Any, path: PathLike, default: _typing.Any = None) -> _typing.Any:
    """
    Read the value at a path.

    Args:
        root: The value to descend into.
        path: Path to read. Empty path returns root itself.
        default: Returned when a segment is missing or a level on the way
            is not a mapping. Pass MISSING to tell absence from null.

    Returns:
        The addressed value (possibly a mapping or list), or default.
    """
    current = root
    for segment in split_path(path):
        if not isinstance(current, _abc.Mapping) or segment not in current:
            return default
        current = current[segment]
    return current


def write_at(root: _typing.Any, path: PathLike, leaf: _typing.Any) -> _typing.Any:
    """
    Return a copy of root with the value at path replaced by leaf.

    Missing mapping levels are created. Intermediate levels that exist but
    are not mappings are replaced by mappings. A None root is treated as an
    empty mapping.

    Raises:
        PathTypeMismatchError: If path is non-empty and root is neither None
            nor a mapping.
    """
    segments = split_path(path)
    if not segments:
        return _copy.deepcopy(leaf)

    if root is None:
        result: dict[str, _typing.Any] = {}
    elif isinstance(root, dict):
        result = _copy.deepcopy(root)
    else:
        raise errors.PathTypeMismatchError(segments, root)

    current = result
    for segment in segments[:-1]:
        if segment not in current or not isinstance(current[segment], dict):
            current[segment] = {}
        current = current[segment]

    current[segments[-1]] = _copy.deepcopy(leaf)
    return result


def build_skeleton(path: PathLike, leaf: _typing.Any) -> _typing.Any:
    """
    Build a single-branch mapping holding leaf at path.

    Example:
        >>> build_skeleton("a.b", 1)
        {'a': {'b': 1}}
    """
    return write_at(None, path, leaf)
