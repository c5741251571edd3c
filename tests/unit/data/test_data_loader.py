"""Data file loading: format detection, parsing, and error mapping."""
from __future__ import annotations

from pathlib import Path

import pytest

from render_prompt.core.data.loader import detect_format, load_data_file, load_data_files
from render_prompt.core.exceptions import DataParseError, DataReadError


@pytest.mark.parametrize(
    ("name", "fmt"),
    [("a.yaml", "yaml"), ("a.yml", "yaml"), ("a.YAML", "yaml"), ("a.json", "json")],
)
def test_detect_format_by_extension(name: str, fmt: str) -> None:
    assert detect_format(Path(name)) == fmt


def test_detect_format_rejects_unknown_extension() -> None:
    with pytest.raises(DataParseError) as exc_info:
        detect_format(Path("data.toml"))
    assert exc_info.value.exit_code == 4


def test_load_yaml_file(write_tree) -> None:
    root = write_tree({"d.yaml": "user:\n  name: Alice\n  tags: [a, b]\n"})
    assert load_data_file(root / "d.yaml") == {"user": {"name": "Alice", "tags": ["a", "b"]}}


def test_load_json_file(write_tree) -> None:
    root = write_tree({"d.json": '{"count": 3, "ok": true, "none": null}'})
    assert load_data_file(root / "d.json") == {"count": 3, "ok": True, "none": None}


def test_load_empty_yaml_document_is_null(write_tree) -> None:
    root = write_tree({"empty.yaml": ""})
    assert load_data_file(root / "empty.yaml") is None


def test_load_yaml_with_bom(write_tree) -> None:
    root = write_tree({"bom.yaml": "\ufeffname: x\n"})
    assert load_data_file(root / "bom.yaml") == {"name": "x"}


def test_load_yaml_dates_become_iso_strings(write_tree) -> None:
    root = write_tree({"d.yaml": "released: 2024-05-01\n"})
    assert load_data_file(root / "d.yaml") == {"released": "2024-05-01"}


def test_missing_file_is_read_error(tmp_path: Path) -> None:
    with pytest.raises(DataReadError) as exc_info:
        load_data_file(tmp_path / "missing.yaml")
    err = exc_info.value
    assert err.code == "DATA_READ"
    assert err.exit_code == 4
    assert err.context["file"].endswith("missing.yaml")


def test_invalid_yaml_is_parse_error(write_tree) -> None:
    root = write_tree({"bad.yaml": "key: [unclosed\n"})
    with pytest.raises(DataParseError) as exc_info:
        load_data_file(root / "bad.yaml")
    assert exc_info.value.code == "DATA_PARSE"


def test_invalid_json_is_parse_error(write_tree) -> None:
    root = write_tree({"bad.json": "{not json}"})
    with pytest.raises(DataParseError):
        load_data_file(root / "bad.json")


def test_colliding_keys_after_stringification_is_parse_error(write_tree) -> None:
    root = write_tree({"keys.yaml": "1: int\n'1': str\n"})
    with pytest.raises(DataParseError, match="Duplicate"):
        load_data_file(root / "keys.yaml")


def test_self_referencing_yaml_alias_is_parse_error(write_tree) -> None:
    root = write_tree({"loop.yaml": "a: &x [*x]\n"})
    with pytest.raises(DataParseError, match="cyclic") as exc_info:
        load_data_file(root / "loop.yaml")
    assert exc_info.value.exit_code == 4


def test_shared_yaml_alias_is_not_a_cycle(write_tree) -> None:
    root = write_tree({"shared.yaml": "base: &b {k: v}\none: *b\ntwo: [*b, *b]\n"})
    assert load_data_file(root / "shared.yaml") == {
        "base": {"k": "v"},
        "one": {"k": "v"},
        "two": [{"k": "v"}, {"k": "v"}],
    }


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("deep.json", "[" * 100000 + "]" * 100000),
        ("deep.yaml", "[" * 5000 + "]" * 5000),
    ],
)
def test_excessively_nested_data_is_parse_error(write_tree, name: str, content: str) -> None:
    root = write_tree({name: content})
    with pytest.raises(DataParseError) as exc_info:
        load_data_file(root / name)
    assert exc_info.value.code == "DATA_PARSE"


def test_load_data_files_merges_in_order(write_tree) -> None:
    root = write_tree(
        {
            "base.yaml": "env: dev\nuser:\n  name: Alice\n  roles: [admin, dev]\n",
            "over.json": '{"env": "prod", "user": {"roles": ["ops"]}}',
        }
    )

    merged = load_data_files([root / "base.yaml", root / "over.json"])

    assert merged == {"env": "prod", "user": {"name": "Alice", "roles": ["ops"]}}


def test_load_data_files_without_paths_is_empty_mapping() -> None:
    assert load_data_files([]) == {}


def test_load_data_files_stops_at_first_failure(write_tree) -> None:
    root = write_tree({"ok.yaml": "a: 1\n"})
    with pytest.raises(DataReadError):
        load_data_files([root / "ok.yaml", root / "missing.json"])
