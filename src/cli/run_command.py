"""Run command wiring for Prevet CLI.

This module registers the run subcommand and delegates execution to the
mode runner shared by CLI and SDK entry points.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from core.config import RuntimeConfig
from core.config_file import load_config
from core.constants import DEFAULT_MODE, SUPPORTED_MODES
from core.mode_runner import build_check_context, render_mode_report, run_mode, save_mode_report


def add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Run every check of one mode")
    parser.add_argument(
        "mode",
        nargs="?",
        choices=SUPPORTED_MODES,
        default=DEFAULT_MODE,
        help="Mode to run",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Also write a JSON report into this directory",
    )


def run_run_command(runtime: RuntimeConfig, args: argparse.Namespace) -> int:
    """Execute one mode and print its report."""
    config = load_config(runtime.config_path)
    repo_root = Path.cwd()
    context = build_check_context(runtime, repo_root, config.ignore_patterns)
    report = run_mode(config, args.mode, context, runtime.max_workers)
    print(render_mode_report(report))
    if args.report_dir:
        report_path = save_mode_report(report, Path(args.report_dir).expanduser().resolve())
        print(f"report_path={report_path}")
    return 0 if report.status == "passed" else 1
