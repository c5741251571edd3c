"""Value tree model for merged YAML/JSON data.

Parsed data is kept as plain Python containers:

- ``None``            - Null
- ``bool``            - Bool
- ``int`` / ``float`` - Number
- ``str``             - String
- ``list``            - Sequence
- ``dict[str, ...]``  - Mapping

``kind_of`` classifies a value into the closed ``ValueKind`` enum so every
consumer (merge, path resolution, formatting) can dispatch exhaustively
instead of relying on ``str()`` for unexpected types.
"""
from __future__ import annotations

import datetime as _dt
from enum import Enum
from typing import Any, Dict, List, Set, Union

Value = Union[None, bool, int, float, str, List["Value"], Dict[str, "Value"]]


class ValueKind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Any) -> ValueKind:
    """Classify ``value`` into one of the six value kinds.

    Raises:
        TypeError: If ``value`` is not part of the value tree model.
    """
    if value is None:
        return ValueKind.NULL
    # bool must be checked before int: bool is an int subclass.
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (int, float)):
        return str(key)
    if isinstance(key, (_dt.date, _dt.datetime)):
        return key.isoformat()
    raise TypeError(f"Unsupported mapping key type: {type(key).__name__}")


def normalize_value(raw: Any) -> Value:
    """Convert parser output into the closed value tree model.

    YAML parsers can produce types outside the model (timestamps, tuples,
    non-string keys, self-referencing aliases). They are converted explicitly
    here; anything else is rejected with ``TypeError``.
    """
    return _normalize(raw, set())


def _normalize(raw: Any, active: Set[int]) -> Value:
    if raw is None or isinstance(raw, (bool, int, float, str)):
        return raw
    if isinstance(raw, (_dt.date, _dt.datetime)):
        return raw.isoformat()
    if not isinstance(raw, (list, tuple, dict)):
        raise TypeError(f"Unsupported value type: {type(raw).__name__}")

    # Only containers on the current path count: a shared alias is fine, a cycle is not.
    marker = id(raw)
    if marker in active:
        raise TypeError("cyclic alias: a container contains itself")
    active.add(marker)
    try:
        if isinstance(raw, dict):
            result: Dict[str, Value] = {}
            for key, item in raw.items():
                text = _key_text(key)
                if text in result:
                    raise TypeError(f"Duplicate mapping key after normalization: {text!r}")
                result[text] = _normalize(item, active)
            return result
        return [_normalize(item, active) for item in raw]
    finally:
        active.discard(marker)


def empty_mapping() -> Dict[str, Value]:
    return {}


__all__ = ["Value", "ValueKind", "kind_of", "normalize_value", "empty_mapping"]
