"""Prevet CLI entry points.

This module maps argparse commands onto config loading, prerequisite
installation, and mode runs.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.config_commands import add_config_commands, run_info_command, run_writeconfig_command
from cli.prereq_command import add_prereq_command, run_prereq_command
from cli.run_command import add_run_command, run_run_command
from core.config import RuntimeConfig
from core.constants import TOOL_VERSION
from core.errors import PrevetConfigError, PrevetDependencyError

EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="prevet", description="Run quality checks by mode")
    parser.add_argument("--config", help="Override PREVET_CONFIG for this command")
    parser.add_argument(
        "--max-workers",
        type=int,
        help="Override PREVET_MAX_WORKERS for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_run_command(subparsers)
    add_prereq_command(subparsers)
    add_config_commands(subparsers)
    subparsers.add_parser("version", help="Print the prevet version")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Prevet CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "version":
        print(TOOL_VERSION)
        return 0
    try:
        runtime = _build_runtime(args.config, args.max_workers)
        if args.command == "run":
            return run_run_command(runtime, args)
        if args.command == "prereq":
            return run_prereq_command(runtime, args)
        if args.command == "writeconfig":
            return run_writeconfig_command(runtime, args)
        if args.command == "info":
            return run_info_command(runtime, args)
    except (PrevetConfigError, PrevetDependencyError) as error:
        print(f"config_error={error}")
        return EXIT_CONFIG_ERROR
    parser.error(f"Unsupported command: {args.command}")
    return EXIT_CONFIG_ERROR


def _build_runtime(config_path: str | None, max_workers: int | None) -> RuntimeConfig:
    """Build runtime config with optional CLI overrides."""
    runtime = RuntimeConfig.from_env()
    if config_path:
        runtime = replace(runtime, config_path=Path(config_path).expanduser().resolve())
    if max_workers is not None:
        if max_workers < 1:
            raise PrevetConfigError("--max-workers must be at least 1.")
        runtime = replace(runtime, max_workers=max_workers)
    return runtime
