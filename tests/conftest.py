import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'render_prompt'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from render_prompt.core.config import CONFIG_FILE_ENV, ENV_PREFIX  # noqa: E402
from render_prompt.core.stdlib_logging import reset_stdlib_logging_for_tests  # noqa: E402
from render_prompt.data import read_yaml  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_render_prompt_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop RENDER_PROMPT_* variables so layered config starts from defaults."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX) or key == CONFIG_FILE_ENV:
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    reset_stdlib_logging_for_tests()
    yield
    reset_stdlib_logging_for_tests()


@pytest.fixture(autouse=True)
def _reset_caches():
    yield
    read_yaml.cache_clear()


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative_path: content}`` under ``tmp_path`` and return the root.

    Content is written verbatim (no newline translation).
    """

    def _write(files: Dict[str, str]) -> Path:
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        return tmp_path

    return _write
