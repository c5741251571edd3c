"""Render engine: include expansion followed by one substitution pass.

Pipeline:
1. READ        - load the template file
2. INCLUDES    - expand ``{{> path }}`` recursively (fresh visited set)
3. VARIABLES   - substitute ``{{ path }}`` once over the expanded text

Any failure propagates unchanged; no partial output is returned.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from render_prompt.core.data.values import Value
from render_prompt.core.exceptions import TemplateReadError
from render_prompt.core.utils.io import PathLike, read_text

from .includes import DEFAULT_MAX_INCLUDE_DEPTH, ExpandedTemplate, IncludeResolver, TemplateDocument
from .variables import UndefinedPolicy, UndefinedVariableWarning, VariableSubstituter

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Rendered text plus what the caller may want to report."""

    text: str
    template_path: Optional[Path] = None
    dependencies: List[Path] = field(default_factory=list)
    warnings: List[UndefinedVariableWarning] = field(default_factory=list)
    variables_substituted: int = 0

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "template_path": str(self.template_path) if self.template_path else None,
            "dependencies": [str(p) for p in self.dependencies],
            "warnings": [str(w) for w in self.warnings],
            "variables_substituted": self.variables_substituted,
        }


class RenderEngine:
    """Render templates against a merged data tree.

    Usage:
        engine = RenderEngine(max_depth=20, policy=UndefinedPolicy.STRICT)
        result = engine.render(Path("prompt.txt"), data)

    Args:
        root_dir: Include root. Defaults to the directory the template path names.
        max_depth: Maximum include nesting depth
        policy: Undefined-variable policy
        encoding: Encoding for template and include files
    """

    def __init__(
        self,
        root_dir: Optional[PathLike] = None,
        max_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
        policy: UndefinedPolicy = UndefinedPolicy.DEFAULT,
        *,
        encoding: str = "utf-8",
    ) -> None:
        self.root_dir = Path(root_dir) if root_dir is not None else None
        self.max_depth = max_depth
        self.policy = UndefinedPolicy(policy)
        self.encoding = encoding

    def render(self, template_path: PathLike, data: Value) -> RenderResult:
        """Render the template at ``template_path``.

        Raises:
            TemplateReadError: Template missing or unreadable
            RenderError: Any include or strict-mode variable failure
        """
        expanded = self.expand(template_path)
        return self._substitute(expanded, data)

    def render_string(self, content: str, data: Value) -> RenderResult:
        """Render in-memory template text.

        Includes resolve against the configured root directory (or the
        current working directory when none is configured).
        """
        root = self.root_dir if self.root_dir is not None else Path.cwd()
        resolver = self._resolver(root)
        expanded = resolver.expand_document(TemplateDocument(None, content))
        return self._substitute(expanded, data)

    def expand(self, template_path: PathLike) -> ExpandedTemplate:
        """Read the template and expand its includes without substituting.

        The template keeps the path it was given (made absolute, symlinks
        intact), so the default root and relative includes are taken from
        the directory it was named in. Only the visited set uses the
        canonical path.
        """
        document, canonical = self._read_template(Path(template_path))
        root = self.root_dir if self.root_dir is not None else document.path.parent  # type: ignore[union-attr]
        resolver = self._resolver(root)
        # Fresh visited set per top-level render: the template is its own ancestor.
        return resolver.expand_document(document, visited={canonical})

    def collect_dependencies(self, template_path: PathLike) -> List[Path]:
        """Return the template path followed by every file it includes."""
        expanded = self.expand(template_path)
        return [expanded.document.path, *expanded.dependencies]  # type: ignore[list-item]

    def _resolver(self, root: Path) -> IncludeResolver:
        return IncludeResolver(root, self.max_depth, encoding=self.encoding)

    def _read_template(self, path: Path) -> Tuple[TemplateDocument, Path]:
        try:
            canonical = path.resolve()
            text = read_text(canonical, encoding=self.encoding)
        except OSError as exc:
            raise TemplateReadError(str(path), exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise TemplateReadError(str(path), f"not valid {self.encoding} text ({exc.reason})") from exc
        except RuntimeError as exc:
            raise TemplateReadError(str(path), str(exc)) from exc
        logger.debug("Loaded template %s", canonical)
        return TemplateDocument(path.absolute(), text), canonical

    def _substitute(self, expanded: ExpandedTemplate, data: Value) -> RenderResult:
        substituter = VariableSubstituter(self.policy)
        outcome = substituter.substitute(expanded.text, data, locate=expanded.locate)
        return RenderResult(
            text=outcome.text,
            template_path=expanded.document.path,
            dependencies=list(expanded.dependencies),
            warnings=outcome.warnings,
            variables_substituted=outcome.substituted,
        )


def render(
    template_path: PathLike,
    merged_data: Value,
    root_dir: Optional[PathLike] = None,
    max_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
    undefined_policy: UndefinedPolicy = UndefinedPolicy.DEFAULT,
) -> RenderResult:
    """Render ``template_path`` with a one-off :class:`RenderEngine`."""
    engine = RenderEngine(root_dir, max_depth, undefined_policy)
    return engine.render(template_path, merged_data)


__all__ = ["RenderResult", "RenderEngine", "render"]
