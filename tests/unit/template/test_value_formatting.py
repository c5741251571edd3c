from __future__ import annotations

import pytest

from render_prompt.core.template.formatting import format_value


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("plain", "plain"),
        ("<b>&{{ x }}</b>", "<b>&{{ x }}</b>"),
        (True, "true"),
        (False, "false"),
        (30, "30"),
        (-7, "-7"),
        (3.5, "3.5"),
        (0.1, "0.1"),
        (float("nan"), "NaN"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
    ],
)
def test_format_scalars(value, expected: str) -> None:
    assert format_value(value) == expected


def test_format_mapping_as_compact_json() -> None:
    assert format_value({"a": 1, "b": [1, 2], "c": None}) == '{"a":1,"b":[1,2],"c":null}'


def test_format_sequence_as_compact_json() -> None:
    assert format_value(["x", True, 2.5]) == '["x",true,2.5]'


def test_format_json_keeps_non_ascii() -> None:
    assert format_value({"name": "Zoë"}) == '{"name":"Zoë"}'


def test_format_json_preserves_key_order() -> None:
    assert format_value({"z": 1, "a": 2}) == '{"z":1,"a":2}'
