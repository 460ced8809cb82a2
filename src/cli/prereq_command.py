"""Prerequisite installation command wiring for Prevet CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from core.config import RuntimeConfig
from core.config_file import load_config
from core.constants import DEFAULT_MODE, SUPPORTED_MODES
from core.mode_runner import build_check_context, install_prerequisites


def add_prereq_command(subparsers: Any) -> None:
    """Register prereq subcommand."""
    parser = subparsers.add_parser(
        "prereq",
        help="Probe and install the prerequisites of one mode",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=SUPPORTED_MODES,
        default=DEFAULT_MODE,
        help="Mode whose prerequisites are installed",
    )


def run_prereq_command(runtime: RuntimeConfig, args: argparse.Namespace) -> int:
    """Resolve prerequisites and print one row per prerequisite."""
    config = load_config(runtime.config_path)
    context = build_check_context(runtime, Path.cwd(), config.ignore_patterns)
    resolutions = install_prerequisites(config, args.mode, context)
    for resolution in resolutions:
        state = "present" if resolution.present else "missing"
        action = " (fetched)" if resolution.remediated else ""
        probe = " ".join(resolution.prerequisite.help_command)
        print(f"{state}{action}\t{probe}\t{resolution.prerequisite.url}")
    return 0 if all(resolution.present for resolution in resolutions) else 1
