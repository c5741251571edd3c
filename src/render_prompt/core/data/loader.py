"""Load YAML/JSON data files into value trees."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import yaml

from render_prompt.core.exceptions import DataParseError, DataReadError
from render_prompt.core.utils.io import PathLike, read_text

from .merge import merge_values
from .values import Value, normalize_value

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})


def _parse_yaml(content: str) -> Any:
    return yaml.safe_load(content)


def _parse_json(content: str) -> Any:
    return json.loads(content)


def detect_format(path: Path) -> str:
    """Return ``"yaml"`` or ``"json"`` based on the file extension.

    Raises:
        DataParseError: If the extension is not a supported data format.
    """
    suffix = path.suffix.lower()
    if suffix in YAML_SUFFIXES:
        return "yaml"
    if suffix in JSON_SUFFIXES:
        return "json"
    raise DataParseError(
        str(path),
        f"unsupported data file extension '{suffix or '<none>'}' (expected .yaml, .yml, or .json)",
    )


def load_data_file(path: PathLike, *, encoding: str = "utf-8") -> Value:
    """Load a single data file.

    Args:
        path: YAML (``.yaml``/``.yml``) or JSON (``.json``) file
        encoding: Text encoding of the file

    Returns:
        Normalized value tree. An empty YAML document yields ``None``.

    Raises:
        DataReadError: File missing or unreadable
        DataParseError: Unsupported extension, invalid syntax, cyclic aliases,
            or nesting too deep to load
    """
    path = Path(path)
    fmt = detect_format(path)

    try:
        content = read_text(path, encoding=encoding)
    except OSError as exc:
        raise DataReadError(str(path), exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise DataReadError(str(path), f"not valid {encoding} text ({exc.reason})") from exc

    try:
        raw = _parse_yaml(content) if fmt == "yaml" else _parse_json(content)
    except (yaml.YAMLError, json.JSONDecodeError, RecursionError) as exc:
        raise DataParseError(str(path), str(exc)) from exc

    try:
        value = normalize_value(raw)
    except (TypeError, RecursionError) as exc:
        raise DataParseError(str(path), str(exc)) from exc

    logger.debug("Loaded %s data from %s", fmt, path)
    return value


def load_data_files(paths: Iterable[PathLike], *, encoding: str = "utf-8") -> Value:
    """Load ``paths`` in order and deep-merge them (later files win).

    Zero paths produce an empty mapping.
    """
    return merge_values(load_data_file(p, encoding=encoding) for p in paths)


__all__ = ["YAML_SUFFIXES", "JSON_SUFFIXES", "detect_format", "load_data_file", "load_data_files"]
