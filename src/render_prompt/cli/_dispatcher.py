"""
CLI dispatcher for render-prompt.

Builds the argument parser from the render command module and maps every
``RenderError`` to its exit code after reporting it on stderr.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from render_prompt.cli import render
from render_prompt.cli._args import UsageErrorParser
from render_prompt.cli._output import OutputFormatter
from render_prompt.core.exceptions import RenderError


def _get_version() -> str:
    """Get render-prompt version string."""
    from render_prompt import __version__

    return __version__


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser for the render command.

    Returns:
        Configured ArgumentParser
    """
    parser = UsageErrorParser(
        prog="render-prompt",
        description=render.SUMMARY,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    render.register_args(parser)
    parser.set_defaults(_func=render.main)
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the render-prompt CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, see ``render_prompt.core.exceptions`` for failures)
    """
    if argv is None:
        argv = sys.argv[1:]

    json_mode = "--json" in argv
    formatter = OutputFormatter(json_mode=json_mode)

    try:
        args = build_parser().parse_args(argv)
        func: Callable[[argparse.Namespace], int] = args._func
        return func(args)
    except RenderError as e:
        formatter.error(e)
        return e.exit_code
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
