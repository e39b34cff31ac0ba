"""
Deep merge of layered values.

Layers are folded left to right, so later layers take precedence:

    >>> merge({"a": 1, "b": {"x": 1}}, {"b": {"y": 2}})
    {'a': 1, 'b': {'x': 1, 'y': 2}}

Rules:
- Two mappings merge key by key, recursively.
- Any other combination (scalars, lists, a type change) is replaced
  wholesale by the later value. Lists are never merged element-wise.
- Inside a mapping, a later key set to None overwrites the earlier value.
- A top-level None layer contributes nothing, which lets callers pass an
  unset default without special-casing it.

Used both for backfilling table defaults under stored values and for
layering configuration files.
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import typing as _typing


def _merge_dicts(
    base: dict[str, _typing.Any],
    override: _abc.Mapping[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """Deep merge two dicts, with override taking priority."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, _abc.Mapping):
            result[key] = _merge_dicts(result[key], value)
        elif isinstance(value, _abc.Mapping):
            result[key] = _merge_dicts({}, value)
        else:
            result[key] = _copy.deepcopy(value)
    return result


def merge_layers(layers: _abc.Iterable[_typing.Any]) -> _typing.Any:
    """
    Merge an ordered sequence of layers (lowest precedence first).

    Args:
        layers: Values to merge. None layers are skipped.

    Returns:
        A new merged value; None if no layer contributed.
    """
    merged: _typing.Any = None
    for layer in layers:
        if layer is None:
            continue
        if isinstance(layer, _abc.Mapping):
            base = merged if isinstance(merged, dict) else {}
            merged = _merge_dicts(base, layer)
        else:
            merged = _copy.deepcopy(layer)
    return merged


def merge(*layers: _typing.Any) -> _typing.Any:
    """Merge layers given as arguments. See merge_layers()."""
    return merge_layers(layers)
