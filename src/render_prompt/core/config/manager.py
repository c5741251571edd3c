"""
render-prompt configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import codecs
import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import jsonschema
import yaml

from render_prompt.core.data.merge import deep_merge
from render_prompt.core.data.values import normalize_value
from render_prompt.core.exceptions import ConfigError
from render_prompt.data import read_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "RENDER_PROMPT_"
CONFIG_FILE_ENV = "RENDER_PROMPT_CONFIG"

_INT_RE = re.compile(r"[-+]?\d+")
_FLOAT_RE = re.compile(r"[-+]?(?:\d+\.\d*|\d*\.\d+)")
_NULL_WORDS = frozenset({"null", "none", "~"})


def coerce_env_value(raw: str) -> Any:
    """Type an environment override: null, bool, int, float, JSON container, else text."""
    text = raw.strip()
    lowered = text.lower()
    if lowered in _NULL_WORDS:
        return None
    if lowered in ("true", "false"):
        return lowered == "true"
    if _INT_RE.fullmatch(text):
        return int(text)
    if _FLOAT_RE.fullmatch(text):
        return float(text)
    if text[:1] in ("{", "[") and text[-1:] in ("}", "]"):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return text
    return text


class ConfigManager:
    """Load, merge, and validate render-prompt configuration.

    Configuration sources (highest to lowest priority):
    1. Explicit overrides passed to ``load_config`` (command-line flags)
    2. Environment variables: RENDER_PROMPT_<section>__<key>
    3. User config file: ``config_file`` argument or $RENDER_PROMPT_CONFIG
    4. Bundled defaults: render_prompt.data/config/defaults.yaml
    """

    def __init__(
        self,
        config_file: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        if config_file is None and self.environ.get(CONFIG_FILE_ENV):
            config_file = Path(self.environ[CONFIG_FILE_ENV])
        self.config_file = Path(config_file) if config_file is not None else None

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(
                f"Cannot read config file {path}: {exc.strerror or exc}",
                context={"file": str(path)},
            ) from exc
        except (yaml.YAMLError, RecursionError) as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}", context={"file": str(path)}) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping", context={"file": str(path)})
        try:
            return normalize_value(data)  # type: ignore[return-value]
        except (TypeError, RecursionError) as exc:
            raise ConfigError(
                f"Unsupported value in config file {path}: {exc}", context={"file": str(path)}
            ) from exc

    def _parse_env_key(self, raw: str) -> List[str]:
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            raise ConfigError(
                f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                context={"key": f"{ENV_PREFIX}{raw}"},
            )
        # Normalize to lowercase so env overrides create canonical keys.
        return [seg.lower() for seg in segs]

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == CONFIG_FILE_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                raise ConfigError(f"Malformed {ENV_PREFIX}* key", context={"key": key})
            yield self._parse_env_key(raw), coerce_env_value(self.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            logger.debug("Config override from environment: %s", ".".join(path))
            self._set_nested(cfg, path, typed_value)

    def validate(self, cfg: Dict[str, Any]) -> None:
        """Validate ``cfg`` against the bundled JSON schema.

        Raises:
            ConfigError: On the first (deepest-path-first) schema violation, or
                when ``render.encoding`` names no usable text codec.
        """
        schema = read_yaml("schemas", "config.schema.yaml")
        validator = jsonschema.Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(cfg), key=lambda e: list(e.path))
        if errors:
            first = errors[0]
            where = ".".join(str(p) for p in first.path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at '{where}': {first.message}",
                context={"key": where},
            )
        self._validate_encoding(cfg)

    def _validate_encoding(self, cfg: Dict[str, Any]) -> None:
        # The schema only checks the type; the codec itself must exist and decode text.
        name = (cfg.get("render") or {}).get("encoding")
        if not isinstance(name, str):
            return
        try:
            codecs.lookup(name)
            b"".decode(name)
        except (LookupError, ValueError) as exc:
            raise ConfigError(
                f"Invalid configuration at 'render.encoding': {exc}",
                context={"key": "render.encoding"},
            ) from exc

    def load_config(self, overrides: Optional[Mapping[str, Any]] = None, *, validate: bool = True) -> Dict[str, Any]:
        """Load the fully merged configuration.

        Args:
            overrides: Highest-priority values (nested mapping)
            validate: Check the result against the config schema

        Returns:
            Merged configuration dictionary
        """
        cfg: Dict[str, Any] = copy.deepcopy(read_yaml("config", "defaults.yaml")) or {}

        if self.config_file is not None:
            logger.debug("Loading config file %s", self.config_file)
            cfg = deep_merge(cfg, self.load_yaml(self.config_file))  # type: ignore[assignment]

        self.apply_env_overrides(cfg)

        if overrides:
            cfg = deep_merge(cfg, dict(overrides))  # type: ignore[assignment]

        if validate:
            self.validate(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated key (e.g. ``render.encoding``)."""
        current: Any = self.load_config()
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current


__all__ = ["ENV_PREFIX", "CONFIG_FILE_ENV", "ConfigManager", "coerce_env_value"]
