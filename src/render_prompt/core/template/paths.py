"""Dotted path parsing and resolution against value trees.

A path such as ``user.profile.name`` or ``items.0`` is split into segments.
Each segment is an identifier (``[A-Za-z_][A-Za-z0-9_]*``) or a non-negative
integer literal. Resolution walks the tree one segment at a time:

- Mapping: the segment must be a key (digit-only segments match string
  keys such as ``"123"``)
- Sequence: the segment must be a base-10 index within ``[0, len)``
- anything else: the path is undefined
"""
from __future__ import annotations

import re
from typing import Sequence, Tuple, Union

from render_prompt.core.data.values import Value, ValueKind, kind_of

SEGMENT_PATTERN = r"(?:[A-Za-z_][A-Za-z0-9_]*|[0-9]+)"
PATH_PATTERN = rf"{SEGMENT_PATTERN}(?:\.{SEGMENT_PATTERN})*"

_PATH_RE = re.compile(PATH_PATTERN)
_INDEX_RE = re.compile(r"[0-9]+")

ResolvedPath = Tuple[str, ...]


class _Undefined:
    """Sentinel for a path that does not resolve (distinct from Null)."""

    _instance = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


def parse_path(expression: str) -> ResolvedPath:
    """Split a dotted path expression into segments.

    Raises:
        ValueError: If ``expression`` does not match the path grammar.
    """
    if not _PATH_RE.fullmatch(expression):
        raise ValueError(f"Invalid variable path: {expression!r}")
    return tuple(expression.split("."))


def resolve(value: Value, path: Sequence[str]) -> Union[Value, _Undefined]:
    """Resolve ``path`` against ``value``.

    Returns:
        The value at ``path`` (which may be ``None`` for Null), or
        ``UNDEFINED`` when any segment is missing or mismatched.

    Raises:
        ValueError: If ``path`` has no segments.
    """
    if not path:
        raise ValueError("Variable path must have at least one segment")

    current: Value = value
    for segment in path:
        kind = kind_of(current)
        if kind is ValueKind.MAPPING:
            if segment not in current:  # type: ignore[operator]
                return UNDEFINED
            current = current[segment]  # type: ignore[index]
        elif kind is ValueKind.SEQUENCE:
            if not _INDEX_RE.fullmatch(segment):
                return UNDEFINED
            index = int(segment)
            if index >= len(current):  # type: ignore[arg-type]
                return UNDEFINED
            current = current[index]  # type: ignore[index]
        elif kind in (ValueKind.NULL, ValueKind.BOOL, ValueKind.NUMBER, ValueKind.STRING):
            return UNDEFINED
        else:  # pragma: no cover - kind_of is exhaustive
            raise AssertionError(f"Unhandled value kind: {kind}")
    return current


def is_undefined(value: object) -> bool:
    return value is UNDEFINED


__all__ = [
    "SEGMENT_PATTERN",
    "PATH_PATTERN",
    "ResolvedPath",
    "UNDEFINED",
    "parse_path",
    "resolve",
    "is_undefined",
]
