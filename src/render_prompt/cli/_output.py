"""Unified CLI output formatting utilities.

Rendered text goes to stdout (or an output file); diagnostics go to stderr
as a machine-parseable line followed by a human-readable sentence:

    ERROR code=UNDEFINED_VAR var="x" template="t.txt" line=1 col=4
    Undefined variable 'x' at t.txt:1:4
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional, TextIO

from render_prompt.core.exceptions import OutputWriteError, RenderError
from render_prompt.core.template.variables import UndefinedVariableWarning
from render_prompt.core.utils.io import write_text


class OutputFormatter:
    """Route rendered output and diagnostics to the right streams."""

    def __init__(
        self,
        json_mode: bool = False,
        indent: int = 2,
        *,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        """Initialize formatter.

        Args:
            json_mode: If True, diagnostics are JSON objects instead of text
            indent: JSON indentation level
            stdout: Output stream (default: sys.stdout at call time)
            stderr: Diagnostic stream (default: sys.stderr at call time)
        """
        self.json_mode = json_mode
        self.indent = indent
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def error(self, error: RenderError) -> None:
        """Report a fatal error on stderr."""
        if self.json_mode:
            print(json.dumps({"error": error.to_json_error()}, indent=self.indent), file=self.stderr)
            return
        print(error.format_machine_readable(), file=self.stderr)
        print(str(error), file=self.stderr)

    def warning(self, warning: UndefinedVariableWarning) -> None:
        """Report a non-fatal undefined-variable warning on stderr."""
        if self.json_mode:
            payload = {
                "warning": {
                    "code": "UNDEFINED_VAR",
                    "var": warning.name,
                    "template": warning.location.file,
                    "line": warning.location.line,
                    "col": warning.location.column,
                }
            }
            print(json.dumps(payload, indent=self.indent), file=self.stderr)
            return
        print(warning.format_machine_readable(), file=self.stderr)
        print(f"Warning: {warning}", file=self.stderr)

    def text(self, message: str) -> None:
        """Output a plain text line on stdout."""
        print(message, file=self.stdout)

    def write_rendered(self, content: str, out_path: Optional[Path] = None, *, encoding: str = "utf-8") -> None:
        """Write rendered text exactly (no trailing newline added).

        Raises:
            OutputWriteError: If ``out_path`` cannot be written
        """
        if out_path is None:
            self.stdout.write(content)
            self.stdout.flush()
            return
        try:
            write_text(out_path, content, encoding=encoding)
        except OSError as exc:
            raise OutputWriteError(str(out_path), exc.strerror or str(exc)) from exc


__all__ = ["OutputFormatter"]
