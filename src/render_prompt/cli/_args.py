"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse

from render_prompt.core.exceptions import UsageError

MIN_INCLUDE_DEPTH = 1
MAX_INCLUDE_DEPTH = 1000


def include_depth(raw: str) -> int:
    """argparse ``type=`` for --max-include-depth (1..1000)."""
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw!r}") from None
    if value < MIN_INCLUDE_DEPTH:
        raise argparse.ArgumentTypeError(f"must be at least {MIN_INCLUDE_DEPTH}")
    if value > MAX_INCLUDE_DEPTH:
        raise argparse.ArgumentTypeError(f"is too large (max: {MAX_INCLUDE_DEPTH})")
    return value


class UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that raises ``UsageError`` instead of exiting.

    Lets the dispatcher report argument problems with the same
    ``ERROR code=...`` protocol as every other failure.
    """

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(f"{self.prog}: {message}", context={"message": message})


def add_template_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-t",
        "--template",
        required=True,
        metavar="PATH",
        help="Template file path",
    )


def add_data_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-d",
        "--data",
        action="append",
        default=[],
        metavar="PATH",
        help="Data file (YAML/JSON). Repeatable; later files take precedence.",
    )


def add_output_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--out",
        dest="output",
        metavar="PATH",
        help="Output file path (default: stdout)",
    )


def add_root_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-r",
        "--root",
        metavar="DIR",
        help="Root directory for include resolution (default: template's directory)",
    )


def add_depth_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--max-include-depth",
        type=include_depth,
        metavar="N",
        help="Maximum include depth (default: 20)",
    )


def add_policy_flags(parser: argparse.ArgumentParser) -> None:
    """Add the mutually exclusive undefined-variable policy flags."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--strict",
        action="store_true",
        help="Treat undefined variables as errors",
    )
    group.add_argument(
        "--warn-undefined",
        action="store_true",
        help="Warn on undefined variables (stderr) and continue",
    )


def add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Additional YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write log records to this file",
    )


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit diagnostics as JSON",
    )


__all__ = [
    "MIN_INCLUDE_DEPTH",
    "MAX_INCLUDE_DEPTH",
    "include_depth",
    "UsageErrorParser",
    "add_template_arg",
    "add_data_arg",
    "add_output_arg",
    "add_root_arg",
    "add_depth_arg",
    "add_policy_flags",
    "add_config_flags",
    "add_json_flag",
]
