"""Canonical text form of resolved values."""
from __future__ import annotations

import json
import math

from render_prompt.core.data.values import Value, ValueKind, kind_of


def _format_number(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def format_value(value: Value) -> str:
    """Format a resolved value for substitution.

    - Null: empty string
    - String: unchanged (never escaped)
    - Number: ``30``, ``3.5``
    - Bool: ``true`` / ``false``
    - Mapping / Sequence: compact JSON, non-ASCII kept as-is
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return ""
    if kind is ValueKind.STRING:
        return value  # type: ignore[return-value]
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return _format_number(value)  # type: ignore[arg-type]
    if kind in (ValueKind.MAPPING, ValueKind.SEQUENCE):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    raise AssertionError(f"Unhandled value kind: {kind}")  # pragma: no cover


__all__ = ["format_value"]
