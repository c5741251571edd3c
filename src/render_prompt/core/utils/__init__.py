"""Shared utilities."""
from .io import PathLike, atomic_write, ensure_parent_dir, read_text, write_text

__all__ = ["PathLike", "atomic_write", "ensure_parent_dir", "read_text", "write_text"]
