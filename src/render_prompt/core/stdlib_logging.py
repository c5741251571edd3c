from __future__ import annotations

import logging
from pathlib import Path

from render_prompt.core.utils.io import ensure_parent_dir

_CONFIGURED_LOG_PATH: str | None = None
_FILE_HANDLER: logging.Handler | None = None
_NULL_HANDLER: logging.Handler | None = None

PACKAGE_LOGGER = "render_prompt"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_stdlib_logging(*, log_path: Path | None = None, level: str = "WARNING") -> None:
    """Configure the package logger.

    With ``log_path`` a file handler is installed; without it log records are
    discarded so stderr only carries the ``ERROR``/``WARNING`` protocol lines.

    Idempotent per-process: if already configured for the same file, only the
    level is updated.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _NULL_HANDLER

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_level_from_name(level))
    logger.propagate = False

    if log_path is None:
        if _NULL_HANDLER is None:
            _NULL_HANDLER = logging.NullHandler()
            logger.addHandler(_NULL_HANDLER)
        return

    resolved = str(Path(log_path).resolve())
    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(_level_from_name(level))
        return

    ensure_parent_dir(Path(resolved))

    # Replace the previously installed file handler when switching paths.
    if _FILE_HANDLER is not None:
        logger.removeHandler(_FILE_HANDLER)
        _FILE_HANDLER.close()
        _FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: clear configured handlers."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _NULL_HANDLER
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None
    _NULL_HANDLER = None


__all__ = ["PACKAGE_LOGGER", "configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
