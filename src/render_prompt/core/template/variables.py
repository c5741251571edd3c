"""Variable substitution for fully include-expanded text.

Recognized forms, by precedence at a given position:

- ``\\{{``            - escape: emits a literal ``{{`` and consumes the backslash
- ``{{ a.b.0 }}``     - variable reference resolved against the data tree
- anything else       - copied through unchanged

Malformed markers (no closing ``}}``, or an interior that is not a dotted
path) are literal text. Substituted values are never rescanned.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from render_prompt.core.data.values import Value
from render_prompt.core.exceptions import SourceLocation, UndefinedVariableError

from .formatting import format_value
from .paths import PATH_PATTERN, UNDEFINED, parse_path, resolve

logger = logging.getLogger(__name__)

_CANDIDATE_RE = re.compile(r"\\\{\{|\{\{")
_VARIABLE_RE = re.compile(r"\{\{\s*(" + PATH_PATTERN + r")\s*\}\}")

Locator = Callable[[int], SourceLocation]


class UndefinedPolicy(str, Enum):
    """What to do when a variable path does not resolve."""

    DEFAULT = "default"
    STRICT = "strict"
    WARN = "warn"

    @classmethod
    def from_flags(cls, *, strict: bool = False, warn: bool = False) -> "UndefinedPolicy":
        if strict:
            return cls.STRICT
        if warn:
            return cls.WARN
        return cls.DEFAULT


@dataclass(frozen=True)
class UndefinedVariableWarning:
    """An undefined variable recorded under the warn policy."""

    name: str
    location: SourceLocation

    def format_machine_readable(self) -> str:
        return (
            f'WARNING code=UNDEFINED_VAR var="{self.name}" template="{self.location.file}" '
            f"line={self.location.line} col={self.location.column}"
        )

    def __str__(self) -> str:
        return f"Undefined variable '{self.name}' at {self.location}"


@dataclass
class SubstitutionResult:
    text: str
    warnings: List[UndefinedVariableWarning] = field(default_factory=list)
    substituted: int = 0


def _default_locator(text: str) -> Locator:
    def locate(position: int) -> SourceLocation:
        line = text.count("\n", 0, position) + 1
        column = position - (text.rfind("\n", 0, position) + 1) + 1
        return SourceLocation("<template>", line, column)

    return locate


class VariableSubstituter:
    """Single-pass scanner replacing ``{{ path }}`` markers.

    Args:
        policy: Undefined-variable policy
    """

    def __init__(self, policy: UndefinedPolicy = UndefinedPolicy.DEFAULT) -> None:
        self.policy = UndefinedPolicy(policy)

    def substitute(
        self,
        text: str,
        data: Value,
        *,
        locate: Optional[Locator] = None,
    ) -> SubstitutionResult:
        """Substitute every variable marker in ``text``.

        Args:
            text: Include-expanded template text
            data: Merged data tree
            locate: Maps an offset in ``text`` to its source location.
                Defaults to line/column within ``text`` itself.

        Returns:
            SubstitutionResult with the rendered text and any warnings

        Raises:
            UndefinedVariableError: Under the strict policy only
        """
        locate = locate or _default_locator(text)
        result = SubstitutionResult(text="")
        out: List[str] = []
        pos = 0

        while True:
            candidate = _CANDIDATE_RE.search(text, pos)
            if candidate is None:
                out.append(text[pos:])
                break

            start = candidate.start()
            out.append(text[pos:start])

            if candidate.group().startswith("\\"):
                out.append("{{")
                pos = candidate.end()
                continue

            marker = _VARIABLE_RE.match(text, start)
            if marker is None:
                # Malformed marker: emit one brace and rescan from the next char.
                out.append("{")
                pos = start + 1
                continue

            name = marker.group(1)
            value = resolve(data, parse_path(name))
            if value is UNDEFINED:
                out.append(self._undefined(name, locate(start), result))
            else:
                out.append(format_value(value))  # type: ignore[arg-type]
                result.substituted += 1
            pos = marker.end()

        result.text = "".join(out)
        return result

    def _undefined(self, name: str, location: SourceLocation, result: SubstitutionResult) -> str:
        if self.policy is UndefinedPolicy.STRICT:
            raise UndefinedVariableError(name, location)
        if self.policy is UndefinedPolicy.WARN:
            warning = UndefinedVariableWarning(name, location)
            result.warnings.append(warning)
            logger.warning("%s", warning)
        return ""


def substitute(
    expanded_text: str,
    merged_data: Value,
    undefined_policy: UndefinedPolicy = UndefinedPolicy.DEFAULT,
) -> str:
    """Functional form returning only the rendered text."""
    return VariableSubstituter(undefined_policy).substitute(expanded_text, merged_data).text


__all__ = [
    "UndefinedPolicy",
    "UndefinedVariableWarning",
    "SubstitutionResult",
    "VariableSubstituter",
    "substitute",
]
