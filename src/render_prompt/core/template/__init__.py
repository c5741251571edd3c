"""Template rendering pipeline: includes, path resolution, substitution."""
from .engine import RenderEngine, RenderResult, render
from .formatting import format_value
from .includes import (
    DEFAULT_MAX_INCLUDE_DEPTH,
    ExpandedTemplate,
    IncludeResolver,
    SourceSpan,
    TemplateDocument,
    expand_includes,
)
from .paths import UNDEFINED, parse_path, resolve
from .variables import (
    SubstitutionResult,
    UndefinedPolicy,
    UndefinedVariableWarning,
    VariableSubstituter,
    substitute,
)

__all__ = [
    "RenderEngine",
    "RenderResult",
    "render",
    "format_value",
    "DEFAULT_MAX_INCLUDE_DEPTH",
    "ExpandedTemplate",
    "IncludeResolver",
    "SourceSpan",
    "TemplateDocument",
    "expand_includes",
    "UNDEFINED",
    "parse_path",
    "resolve",
    "SubstitutionResult",
    "UndefinedPolicy",
    "UndefinedVariableWarning",
    "VariableSubstituter",
    "substitute",
]
