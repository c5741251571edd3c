"""Typed view over the merged configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from render_prompt.core.template.includes import DEFAULT_MAX_INCLUDE_DEPTH
from render_prompt.core.template.variables import UndefinedPolicy

from .manager import ConfigManager


@dataclass(frozen=True)
class RenderSettings:
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH
    undefined: UndefinedPolicy = UndefinedPolicy.DEFAULT
    encoding: str = "utf-8"
    root_dir: Optional[Path] = None
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "RenderSettings":
        render: Dict[str, Any] = dict(cfg.get("render") or {})
        logging_cfg: Dict[str, Any] = dict(cfg.get("logging") or {})
        root_dir = render.get("root_dir")
        log_file = logging_cfg.get("file")
        return cls(
            max_include_depth=int(render.get("max_include_depth", DEFAULT_MAX_INCLUDE_DEPTH)),
            undefined=UndefinedPolicy(render.get("undefined", UndefinedPolicy.DEFAULT.value)),
            encoding=str(render.get("encoding", "utf-8")),
            root_dir=Path(root_dir) if root_dir else None,
            log_level=str(logging_cfg.get("level", "WARNING")),
            log_file=Path(log_file) if log_file else None,
        )


def load_settings(
    config_file: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> RenderSettings:
    """Load layered configuration and return typed settings."""
    manager = ConfigManager(config_file, environ=environ)
    return RenderSettings.from_config(manager.load_config(overrides))


__all__ = ["RenderSettings", "load_settings"]
