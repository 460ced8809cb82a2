"""Configuration inspection and generation commands for Prevet CLI."""

from __future__ import annotations

import argparse
from typing import Any

from checks.registry import check_title
from core.config import RuntimeConfig
from core.config_file import default_config, load_config, write_config


def add_config_commands(subparsers: Any) -> None:
    """Register writeconfig and info subcommands."""
    subparsers.add_parser("writeconfig", help="Write the default configuration file")
    subparsers.add_parser("info", help="Print the loaded configuration")


def run_writeconfig_command(runtime: RuntimeConfig, args: argparse.Namespace) -> int:
    """Write the default configuration to the configured path."""
    _ = args
    config_path = write_config(runtime.config_path, default_config())
    print(f"config_path={config_path}")
    return 0


def run_info_command(runtime: RuntimeConfig, args: argparse.Namespace) -> int:
    """Print modes, checks, and budgets of the loaded configuration."""
    _ = args
    config = load_config(runtime.config_path)
    print(f"config_path={runtime.config_path}")
    print(f"min_version={config.min_version}")
    print(f"ignore_patterns={','.join(config.ignore_patterns)}")
    for mode_name, mode in config.modes.items():
        print(f"{mode_name}\tmax_duration={mode.max_duration:g}s")
        for check in mode.iter_checks():
            print(f"  {check.kind}\t{check_title(check)}")
    return 0
