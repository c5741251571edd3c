"""Text file I/O helpers.

- Reads keep line endings untouched (no universal-newline translation) and
  drop a leading UTF-8 byte order mark.
- Writes are atomic: temp file in the target directory, fsync, then
  ``os.replace``. A failed render never leaves a partial output file.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

PathLike = Union[str, Path]

_BOM = "\ufeff"


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory for ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def read_text(path: PathLike, encoding: str = "utf-8") -> str:
    """Read a text file exactly as stored, minus a leading BOM.

    Raises:
        OSError: If the file is missing or unreadable
        UnicodeDecodeError: If the content is not valid for ``encoding``
    """
    with open(Path(path), "r", encoding=encoding, newline="") as f:
        content = f.read()
    if content.startswith(_BOM):
        content = content[len(_BOM):]
    return content


def atomic_write(
    path: PathLike,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write to ``path`` atomically using a temp file + fsync + rename.

    Any leftover temp file is cleaned up on failure.
    """
    path = Path(path)
    ensure_parent_dir(path)

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            newline="",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                # Best-effort cleanup; never mask the original failure
                pass


def write_text(path: PathLike, content: str, encoding: str = "utf-8") -> None:
    """Atomically write ``content`` to ``path``."""

    def _writer(f: TextIO) -> None:
        f.write(content)

    atomic_write(path, _writer, encoding=encoding)


__all__ = ["PathLike", "ensure_parent_dir", "read_text", "atomic_write", "write_text"]
