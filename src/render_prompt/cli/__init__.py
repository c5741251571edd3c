"""
render-prompt CLI package.

Framework utilities for the command line:
- _output: Output routing (rendered text, ERROR/WARNING diagnostics)
- _args: Argument registration helpers
- _dispatcher: Parser construction and exit-code mapping
"""
from ._output import OutputFormatter
from ._args import (
    UsageErrorParser,
    add_config_flags,
    add_data_arg,
    add_depth_arg,
    add_json_flag,
    add_output_arg,
    add_policy_flags,
    add_root_arg,
    add_template_arg,
)

__all__ = [
    "OutputFormatter",
    "UsageErrorParser",
    "add_config_flags",
    "add_data_arg",
    "add_depth_arg",
    "add_json_flag",
    "add_output_arg",
    "add_policy_flags",
    "add_root_arg",
    "add_template_arg",
]
