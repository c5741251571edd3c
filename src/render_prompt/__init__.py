"""
render-prompt - minimal template renderer

Expands ``{{> file }}`` includes and substitutes ``{{ path }}`` variables
from merged YAML/JSON data. No conditionals, loops, or expressions.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
