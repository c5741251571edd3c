"""Include resolution with depth limits, cycle detection, and root confinement.

Handles ``{{> relative/path }}`` directives. Included files are expanded
recursively, so directives inside included content are resolved too.

Safety rules, checked per directive in this order:
1. nesting depth must stay below ``max_depth``
2. the canonical target must live under the canonical root directory
3. the target must not already be on the active include chain

Only the active ancestor chain is tracked (push on enter, pop on return),
so the same file may be included from several sibling branches.

Expansion also produces a source map (``SourceSpan`` list) from offsets in
the expanded text back to the file each character came from, so later
stages can report ``file:line:column`` for markers found after expansion.
"""
from __future__ import annotations

import bisect
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple

from render_prompt.core.exceptions import (
    CircularIncludeError,
    IncludeDepthExceededError,
    IncludeFileError,
    PathTraversalError,
    SourceLocation,
)
from render_prompt.core.utils.io import read_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_INCLUDE_DEPTH = 20

# {{> path }} not preceded by a backslash; the path is non-empty and has no "}".
INCLUDE_PATTERN = re.compile(r"(?<!\\)\{\{>\s*([^}\s][^}]*?)\s*\}\}")

Reader = Callable[[Path, str], str]


@dataclass(frozen=True)
class TemplateDocument:
    """Raw text of one template or include file plus its resolved path."""

    path: Optional[Path]
    text: str

    @property
    def display_path(self) -> str:
        return str(self.path) if self.path is not None else "<template>"


@dataclass(frozen=True)
class SourceSpan:
    """Maps ``[start, end)`` of expanded text to ``document.text[offset:]``."""

    start: int
    end: int
    document: TemplateDocument
    offset: int

    def shifted(self, delta: int) -> "SourceSpan":
        return SourceSpan(self.start + delta, self.end + delta, self.document, self.offset)


@dataclass
class ExpandedTemplate:
    """Result of include expansion for one top-level document."""

    document: TemplateDocument
    text: str
    spans: List[SourceSpan] = field(default_factory=list)
    dependencies: List[Path] = field(default_factory=list)

    def locate(self, position: int) -> SourceLocation:
        """Return the source location of ``position`` in the expanded text."""
        starts = [span.start for span in self.spans]
        index = bisect.bisect_right(starts, position) - 1
        if index < 0:
            return SourceLocation(self.document.display_path, 1, 1)
        span = self.spans[index]
        offset = span.offset + (position - span.start)
        text = span.document.text
        line = text.count("\n", 0, offset) + 1
        column = offset - (text.rfind("\n", 0, offset) + 1) + 1
        return SourceLocation(span.document.display_path, line, column)


def _default_reader(path: Path, encoding: str) -> str:
    return read_text(path, encoding=encoding)


class IncludeResolver:
    """Expand ``{{> path }}`` directives relative to the including file.

    Args:
        root_dir: Directory every include must resolve under
        max_depth: Maximum include nesting depth
        encoding: Encoding used to read included files
        reader: File reading callable ``(path, encoding) -> str``
    """

    INCLUDE_PATTERN = INCLUDE_PATTERN

    def __init__(
        self,
        root_dir: Path,
        max_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
        *,
        encoding: str = "utf-8",
        reader: Optional[Reader] = None,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.max_depth = max_depth
        self.encoding = encoding
        self._reader = reader or _default_reader

    def canonical_root(self) -> Path:
        return self.root_dir.resolve()

    def expand_document(
        self,
        document: TemplateDocument,
        *,
        visited: Optional[Set[Path]] = None,
        depth: int = 0,
    ) -> ExpandedTemplate:
        """Expand every include in ``document``.

        Args:
            document: Template to expand; its path (if any) is the base for
                relative includes and seeds the visited set
            visited: Active ancestor chain. A fresh set is created when
                omitted; callers must never share one across renders.
            depth: Starting depth

        Returns:
            ExpandedTemplate with text, source map, and dependencies
        """
        if visited is None:
            visited = {document.path} if document.path is not None else set()
        stack = [document.path] if document.path is not None else []
        dependencies: List[Path] = []
        text, spans = self._expand(
            document, self.canonical_root(), visited, stack, depth, dependencies
        )
        return ExpandedTemplate(document, text, spans, dependencies)

    def expand(
        self,
        content: str,
        current_file: Optional[Path],
        visited: Set[Path],
        depth: int = 0,
    ) -> str:
        """Expand includes in ``content`` and return only the text."""
        document = TemplateDocument(current_file, content)
        return self.expand_document(document, visited=visited, depth=depth).text

    def _expand(
        self,
        document: TemplateDocument,
        root: Path,
        visited: Set[Path],
        stack: List[Path],
        depth: int,
        dependencies: List[Path],
    ) -> Tuple[str, List[SourceSpan]]:
        content = document.text
        pieces: List[str] = []
        spans: List[SourceSpan] = []
        length = 0
        last = 0

        for match in self.INCLUDE_PATTERN.finditer(content):
            start, end = match.span()
            if start > last:
                pieces.append(content[last:start])
                spans.append(SourceSpan(length, length + (start - last), document, last))
                length += start - last

            included, child_spans = self._include(
                match.group(1), document, root, visited, stack, depth, dependencies
            )
            pieces.append(included)
            spans.extend(span.shifted(length) for span in child_spans)
            length += len(included)
            last = end

        if last < len(content):
            pieces.append(content[last:])
            spans.append(SourceSpan(length, length + (len(content) - last), document, last))

        return "".join(pieces), spans

    def _include(
        self,
        raw: str,
        parent: TemplateDocument,
        root: Path,
        visited: Set[Path],
        stack: List[Path],
        depth: int,
        dependencies: List[Path],
    ) -> Tuple[str, List[SourceSpan]]:
        source = parent.display_path
        if depth >= self.max_depth:
            raise IncludeDepthExceededError(self.max_depth, source)

        include_path = raw.strip()
        target = self._resolve_target(include_path, parent, root)

        if not _is_within(target, root):
            raise PathTraversalError(include_path, str(root))

        if target in visited:
            chain = [str(p) for p in stack + [target]]
            raise CircularIncludeError(str(target), chain)

        try:
            text = self._reader(target, self.encoding)
        except OSError as exc:
            raise IncludeFileError(str(target), source, exc.strerror or str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise IncludeFileError(
                str(target), source, f"not valid {self.encoding} text ({exc.reason})"
            ) from exc

        logger.debug("Including %s from %s (depth %d)", target, source, depth + 1)
        if target not in dependencies:
            dependencies.append(target)

        visited.add(target)
        stack.append(target)
        try:
            return self._expand(
                TemplateDocument(target, text), root, visited, stack, depth + 1, dependencies
            )
        finally:
            stack.pop()
            visited.discard(target)

    def _resolve_target(self, include_path: str, parent: TemplateDocument, root: Path) -> Path:
        base_dir = parent.path.parent if parent.path is not None else root
        try:
            return (base_dir / include_path).resolve()
        except (OSError, RuntimeError) as exc:
            # RuntimeError: symlink loop on older Python versions
            raise IncludeFileError(include_path, parent.display_path, str(exc)) from exc


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def expand_includes(
    document_text: str,
    current_file: Optional[Path],
    root_dir: Path,
    visited: Set[Path],
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
) -> str:
    """Functional form of :meth:`IncludeResolver.expand`."""
    return IncludeResolver(root_dir, max_depth).expand(document_text, current_file, visited, depth)


__all__ = [
    "DEFAULT_MAX_INCLUDE_DEPTH",
    "INCLUDE_PATTERN",
    "TemplateDocument",
    "SourceSpan",
    "ExpandedTemplate",
    "IncludeResolver",
    "expand_includes",
]
