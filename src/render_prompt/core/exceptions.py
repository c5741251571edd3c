from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

EXIT_SUCCESS = 0
EXIT_USAGE_ERROR = 2
EXIT_TEMPLATE_ERROR = 3
EXIT_DATA_ERROR = 4
EXIT_INCLUDE_ERROR = 5
EXIT_VARIABLE_ERROR = 6
EXIT_CIRCULAR_OR_DEPTH_ERROR = 7


@dataclass(frozen=True)
class SourceLocation:
    """Position of a marker inside a template or include file (1-based)."""

    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


def _quote(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    text = str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{text}"'


class RenderError(Exception):
    """Base exception for render-prompt.

    Subclasses set ``code`` (the symbolic name used in machine-readable
    output) and ``exit_code`` (the process exit status the CLI maps to).
    """

    code = "RENDER_ERROR"
    exit_code = 1

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.code,
            "context": self.context,
        }

    def format_machine_readable(self) -> str:
        """Render the ``ERROR code=<NAME> key=value ...`` line."""
        parts = [f"ERROR code={self.code}"]
        for key, value in self.context.items():
            if value is None:
                continue
            parts.append(f"{key}={_quote(value)}")
        return " ".join(parts)


class UsageError(RenderError):
    """Raised for bad or missing command-line input."""

    code = "USAGE"
    exit_code = EXIT_USAGE_ERROR


class ConfigError(RenderError):
    """Raised when layered configuration is malformed or fails its schema."""

    code = "CONFIG_INVALID"
    exit_code = EXIT_USAGE_ERROR


class TemplateReadError(RenderError):
    """Raised when the top-level template cannot be read."""

    code = "TEMPLATE_READ"
    exit_code = EXIT_TEMPLATE_ERROR

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Failed to read template file '{path}': {reason}",
            context={"template": path},
        )
        self.path = path


class DataReadError(RenderError):
    """Raised when a data file is missing or unreadable."""

    code = "DATA_READ"
    exit_code = EXIT_DATA_ERROR

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to read data file '{path}': {reason}", context={"file": path})
        self.path = path


class DataParseError(RenderError):
    """Raised when a data file is not valid YAML/JSON."""

    code = "DATA_PARSE"
    exit_code = EXIT_DATA_ERROR

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to parse data file '{path}': {reason}", context={"file": path})
        self.path = path


class IncludeFileError(RenderError):
    """Raised when an included file cannot be resolved or read."""

    code = "INCLUDE_NOT_FOUND"
    exit_code = EXIT_INCLUDE_ERROR

    def __init__(self, path: str, source: str, reason: str) -> None:
        super().__init__(
            f"Failed to read included file '{path}' (referenced from {source}): {reason}",
            context={"file": path, "from": source},
        )
        self.path = path
        self.source = source


class PathTraversalError(RenderError):
    """Raised when an include resolves outside the configured root directory."""

    code = "PATH_TRAVERSAL"
    exit_code = EXIT_INCLUDE_ERROR

    def __init__(self, path: str, root: str) -> None:
        super().__init__(
            f"Path traversal attempt detected: '{path}' is outside root directory '{root}'",
            context={"path": path, "root": root},
        )
        self.path = path
        self.root = root


class CircularIncludeError(RenderError):
    """Raised when an include targets a file already on the active include chain."""

    code = "CIRCULAR_INCLUDE"
    exit_code = EXIT_CIRCULAR_OR_DEPTH_ERROR

    def __init__(self, path: str, chain: list[str] | None = None) -> None:
        chain = list(chain or [])
        message = f"Circular include detected: {path}"
        if chain:
            message += f" (chain: {' -> '.join(chain)})"
        super().__init__(message, context={"path": path})
        self.path = path
        self.chain = chain


class IncludeDepthExceededError(RenderError):
    """Raised when include nesting reaches the configured maximum depth."""

    code = "DEPTH_EXCEEDED"
    exit_code = EXIT_CIRCULAR_OR_DEPTH_ERROR

    def __init__(self, max_depth: int, source: str) -> None:
        super().__init__(
            f"Include depth limit exceeded (max: {max_depth}) while processing {source}",
            context={"max": max_depth, "file": source},
        )
        self.max_depth = max_depth
        self.source = source


class UndefinedVariableError(RenderError):
    """Raised under the strict policy when a variable path does not resolve."""

    code = "UNDEFINED_VAR"
    exit_code = EXIT_VARIABLE_ERROR

    def __init__(self, name: str, location: SourceLocation) -> None:
        super().__init__(
            f"Undefined variable '{name}' at {location}",
            context={
                "var": name,
                "template": location.file,
                "line": location.line,
                "col": location.column,
            },
        )
        self.name = name
        self.location = location


class OutputWriteError(RenderError):
    """Raised when the rendered output cannot be written."""

    code = "OUTPUT_WRITE"
    exit_code = EXIT_INCLUDE_ERROR

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to write output file '{path}': {reason}", context={"file": path})
        self.path = path


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_USAGE_ERROR",
    "EXIT_TEMPLATE_ERROR",
    "EXIT_DATA_ERROR",
    "EXIT_INCLUDE_ERROR",
    "EXIT_VARIABLE_ERROR",
    "EXIT_CIRCULAR_OR_DEPTH_ERROR",
    "SourceLocation",
    "RenderError",
    "UsageError",
    "ConfigError",
    "TemplateReadError",
    "DataReadError",
    "DataParseError",
    "IncludeFileError",
    "PathTraversalError",
    "CircularIncludeError",
    "IncludeDepthExceededError",
    "UndefinedVariableError",
    "OutputWriteError",
]
