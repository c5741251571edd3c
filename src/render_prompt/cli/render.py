"""
render-prompt render command.

SUMMARY: Render a template with includes and variables

Loads and merges the data files, expands ``{{> file }}`` includes under the
root directory, substitutes ``{{ path }}`` variables, and writes the result
to stdout or ``--out``. With ``--print-deps`` only the template and its
include dependencies are listed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from render_prompt.cli._args import (
    add_config_flags,
    add_data_arg,
    add_depth_arg,
    add_json_flag,
    add_output_arg,
    add_policy_flags,
    add_root_arg,
    add_template_arg,
)
from render_prompt.cli._output import OutputFormatter
from render_prompt.core.config import RenderSettings, load_settings
from render_prompt.core.data import load_data_files
from render_prompt.core.stdlib_logging import configure_stdlib_logging
from render_prompt.core.template import RenderEngine, UndefinedPolicy

SUMMARY = "Render a template with includes and variables"

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_template_arg(parser)
    add_data_arg(parser)
    add_output_arg(parser)
    add_root_arg(parser)
    add_depth_arg(parser)
    add_policy_flags(parser)
    parser.add_argument(
        "--print-deps",
        action="store_true",
        help="Print the template and every included file, one per line, and exit",
    )
    add_config_flags(parser)
    add_json_flag(parser)


def _overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    render: Dict[str, Any] = {}
    if getattr(args, "max_include_depth", None) is not None:
        render["max_include_depth"] = args.max_include_depth
    if getattr(args, "strict", False) or getattr(args, "warn_undefined", False):
        policy = UndefinedPolicy.from_flags(strict=args.strict, warn=args.warn_undefined)
        render["undefined"] = policy.value
    if getattr(args, "root", None):
        render["root_dir"] = args.root

    log: Dict[str, Any] = {}
    if getattr(args, "log_level", None):
        log["level"] = args.log_level
    if getattr(args, "log_file", None):
        log["file"] = args.log_file

    overrides: Dict[str, Any] = {}
    if render:
        overrides["render"] = render
    if log:
        overrides["logging"] = log
    return overrides


def _settings(args: argparse.Namespace) -> RenderSettings:
    config_file = Path(args.config) if getattr(args, "config", None) else None
    return load_settings(config_file, _overrides_from_args(args))


def main(args: argparse.Namespace) -> int:
    """Render the template - delegates to RenderEngine.

    Raises:
        RenderError: Reported and mapped to an exit code by the dispatcher
    """
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    settings = _settings(args)
    configure_stdlib_logging(log_path=settings.log_file, level=settings.log_level)

    engine = RenderEngine(
        root_dir=settings.root_dir,
        max_depth=settings.max_include_depth,
        policy=settings.undefined,
        encoding=settings.encoding,
    )

    if args.print_deps:
        for path in engine.collect_dependencies(args.template):
            formatter.text(str(path))
        return 0

    data = load_data_files(args.data, encoding=settings.encoding)
    result = engine.render(args.template, data)

    if result.has_warnings:
        logger.info("%d undefined variable(s) rendered empty", len(result.warnings))
        for warning in result.warnings:
            formatter.warning(warning)

    out_path = Path(args.output) if args.output else None
    formatter.write_rendered(result.text, out_path, encoding=settings.encoding)
    logger.info(
        "Rendered %s (%d includes, %d variables)",
        result.template_path,
        len(result.dependencies),
        result.variables_substituted,
    )
    return 0


if __name__ == "__main__":
    from render_prompt.cli._dispatcher import main as dispatch

    sys.exit(dispatch(sys.argv[1:]))
