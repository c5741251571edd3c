"""Canonical deep merge for value trees.

Merge rule:
- Mapping + Mapping: combine key by key (recursively for shared keys)
- Anything else: the later value wins outright. Sequences are replaced
  wholesale, never merged element by element.

Inputs are never mutated; merged mappings are new ``dict`` objects whose
key order is the base's keys followed by new keys from the override.
"""
from __future__ import annotations

from typing import Iterable

from .values import Value, ValueKind, empty_mapping, kind_of


def deep_merge(base: Value, override: Value) -> Value:
    """Combine two values, ``override`` taking precedence.

    Args:
        base: Earlier value (lower priority)
        override: Later value (higher priority)

    Returns:
        Merged value

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
        >>> deep_merge({"x": [1, 2]}, {"x": [9]})
        {'x': [9]}
    """
    if kind_of(base) is not ValueKind.MAPPING or kind_of(override) is not ValueKind.MAPPING:
        return override

    result = dict(base)  # type: ignore[arg-type]
    for key, value in override.items():  # type: ignore[union-attr]
        if key in result:
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def merge_values(values: Iterable[Value]) -> Value:
    """Fold ``values`` left to right with :func:`deep_merge`.

    An empty input produces an empty mapping.
    """
    merged: Value = empty_mapping()
    for value in values:
        merged = deep_merge(merged, value)
    return merged


__all__ = ["deep_merge", "merge_values"]
