from __future__ import annotations

import logging

import pytest

from render_prompt.core.exceptions import UndefinedVariableError
from render_prompt.core.template.variables import (
    UndefinedPolicy,
    VariableSubstituter,
    substitute,
)

DATA = {
    "name": "Alice",
    "user": {"age": 30, "tags": ["a", "b"], "nickname": None},
    "template_like": "{{ name }}",
}


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Hello {{ name }}!", "Hello Alice!"),
        ("{{name}}", "Alice"),
        ("{{   name   }}", "Alice"),
        ("{{ user.age }}", "30"),
        ("{{ user.tags.1 }}", "b"),
        ("{{ user.tags }}", '["a","b"]'),
        ("[{{ user.nickname }}]", "[]"),
        ("{{ name }}{{ name }}", "AliceAlice"),
        ("no markers at all", "no markers at all"),
    ],
)
def test_substitutes_variables(text: str, expected: str) -> None:
    assert substitute(text, DATA) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("\\{{ name }}", "{{ name }}"),
        ("\\{{> part.txt }}", "{{> part.txt }}"),
        ("\\{{{{ name }}", "{{Alice"),
        ("a\\b \\{ c", "a\\b \\{ c"),
    ],
)
def test_escape_sequences(text: str, expected: str) -> None:
    assert substitute(text, DATA) == expected


@pytest.mark.parametrize(
    "text",
    [
        "{{ name",
        "{{ }}",
        "{{}}",
        "{{ a-b }}",
        "{{ a..b }}",
        "{{ .a }}",
        "{{ a b }}",
        "{ name }",
        "{{> part.txt }}",
        "}} name {{",
    ],
)
def test_malformed_markers_pass_through(text: str) -> None:
    assert substitute(text, DATA) == text


def test_marker_inside_extra_braces() -> None:
    assert substitute("{{{ name }}}", DATA) == "{Alice}"


def test_substituted_values_are_not_rescanned() -> None:
    assert substitute("{{ template_like }}", DATA) == "{{ name }}"


def test_default_policy_renders_undefined_as_empty() -> None:
    assert substitute("[{{ missing }}][{{ user.missing }}]", DATA) == "[][]"


def test_strict_policy_raises_with_location() -> None:
    substituter = VariableSubstituter(UndefinedPolicy.STRICT)

    with pytest.raises(UndefinedVariableError) as exc_info:
        substituter.substitute("line1\n  {{ missing.key }}", DATA)

    err = exc_info.value
    assert err.exit_code == 6
    assert err.name == "missing.key"
    assert (err.location.line, err.location.column) == (2, 3)
    assert err.format_machine_readable() == (
        'ERROR code=UNDEFINED_VAR var="missing.key" template="<template>" line=2 col=3'
    )


def test_strict_policy_accepts_null_values() -> None:
    substituter = VariableSubstituter(UndefinedPolicy.STRICT)
    assert substituter.substitute("[{{ user.nickname }}]", DATA).text == "[]"


def test_warn_policy_records_warnings_and_continues() -> None:
    substituter = VariableSubstituter(UndefinedPolicy.WARN)

    result = substituter.substitute("a {{ one }} b\n{{ two }} {{ name }}", DATA)

    assert result.text == "a  b\n Alice"
    assert [w.name for w in result.warnings] == ["one", "two"]
    assert [(w.location.line, w.location.column) for w in result.warnings] == [(1, 3), (2, 1)]
    assert result.substituted == 1
    assert result.warnings[0].format_machine_readable() == (
        'WARNING code=UNDEFINED_VAR var="one" template="<template>" line=1 col=3'
    )


def test_warn_policy_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    substituter = VariableSubstituter(UndefinedPolicy.WARN)

    with caplog.at_level(logging.WARNING, logger="render_prompt"):
        substituter.substitute("{{ missing }}", DATA)

    assert any("Undefined variable 'missing'" in r.getMessage() for r in caplog.records)


def test_default_policy_produces_no_warnings() -> None:
    result = VariableSubstituter().substitute("{{ missing }}", DATA)
    assert result.warnings == []


def test_policy_from_flags() -> None:
    assert UndefinedPolicy.from_flags() is UndefinedPolicy.DEFAULT
    assert UndefinedPolicy.from_flags(strict=True) is UndefinedPolicy.STRICT
    assert UndefinedPolicy.from_flags(warn=True) is UndefinedPolicy.WARN
    assert UndefinedPolicy("warn") is UndefinedPolicy.WARN


def test_substitution_against_non_mapping_data() -> None:
    assert substitute("{{ 0 }}-{{ 1 }}", ["x", "y"]) == "x-y"
    assert substitute("[{{ anything }}]", None) == "[]"


def test_greeting_example() -> None:
    text = "Hello, {{ name }}! You are {{ age }}."
    assert substitute(text, {"name": "Alice", "age": 30}) == "Hello, Alice! You are 30."


def test_undefined_against_empty_data_by_policy() -> None:
    assert substitute("Hi {{ x }}!", {}) == "Hi !"
    with pytest.raises(UndefinedVariableError) as exc_info:
        substitute("Hi {{ x }}!", {}, UndefinedPolicy.STRICT)
    assert exc_info.value.name == "x"


def test_sequence_index_out_of_range_by_policy() -> None:
    data = {"items": ["a", "b"]}
    assert substitute("{{ items.1 }}", data) == "b"
    assert substitute("{{ items.5 }}", data) == ""
    with pytest.raises(UndefinedVariableError):
        substitute("{{ items.5 }}", data, UndefinedPolicy.STRICT)
