from __future__ import annotations

import datetime as dt

import pytest

from render_prompt.core.data.values import ValueKind, kind_of, normalize_value


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (None, ValueKind.NULL),
        (True, ValueKind.BOOL),
        (False, ValueKind.BOOL),
        (0, ValueKind.NUMBER),
        (3.5, ValueKind.NUMBER),
        ("", ValueKind.STRING),
        ([], ValueKind.SEQUENCE),
        ({}, ValueKind.MAPPING),
    ],
)
def test_kind_of_classifies_every_value_kind(value, kind) -> None:
    assert kind_of(value) is kind


def test_kind_of_rejects_values_outside_the_model() -> None:
    with pytest.raises(TypeError):
        kind_of(object())


def test_normalize_converts_dates_to_iso_strings() -> None:
    raw = {"day": dt.date(2024, 1, 2), "at": dt.datetime(2024, 1, 2, 3, 4, 5)}
    assert normalize_value(raw) == {"day": "2024-01-02", "at": "2024-01-02T03:04:05"}


def test_normalize_stringifies_scalar_keys() -> None:
    raw = {2: "two", True: "yes", None: "nothing", 1.5: "x"}
    assert normalize_value(raw) == {"2": "two", "true": "yes", "null": "nothing", "1.5": "x"}


def test_normalize_rejects_key_collisions_after_stringification() -> None:
    with pytest.raises(TypeError, match="Duplicate"):
        normalize_value({1: "int", "1": "str"})


def test_normalize_turns_tuples_into_sequences() -> None:
    assert normalize_value({"xs": (1, (2, 3))}) == {"xs": [1, [2, 3]]}


def test_normalize_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError):
        normalize_value({"s": {1, 2}})


def test_normalize_rejects_self_containing_sequence() -> None:
    items: list = [1]
    items.append(items)
    with pytest.raises(TypeError, match="cyclic"):
        normalize_value({"items": items})


def test_normalize_allows_the_same_container_in_sibling_positions() -> None:
    shared = {"k": "v"}
    assert normalize_value({"a": shared, "b": [shared, shared]}) == {
        "a": {"k": "v"},
        "b": [{"k": "v"}, {"k": "v"}],
    }
