"""Public SDK surface for Prevet.

This module provides a stable import path for programmatic users.
It re-exports config loading, the mode runner, and coverage aggregation.
"""

from __future__ import annotations

from checks.coverage_aggregation import aggregate_coverage, evaluate_band
from checks.coverage_profile import parse_cover_profile
from checks.coverage_types import CoverageBlock, CoverageReport, CoverageSample, ScopeVerdict
from checks.prerequisites import ensure_prerequisites, resolve_prerequisite
from core.config import RuntimeConfig
from core.config_file import default_config, load_config, write_config
from core.mode_runner import (
    build_check_context,
    install_prerequisites,
    render_mode_report,
    run_mode,
)
from core.run_types import CheckResult, ModeReport
from core.types import CheckPrerequisite, Config, Coverage, CoverageSettings, Custom, Mode

__all__ = [
    "CheckPrerequisite",
    "CheckResult",
    "Config",
    "Coverage",
    "CoverageBlock",
    "CoverageReport",
    "CoverageSample",
    "CoverageSettings",
    "Custom",
    "Mode",
    "ModeReport",
    "RuntimeConfig",
    "ScopeVerdict",
    "aggregate_coverage",
    "build_check_context",
    "default_config",
    "ensure_prerequisites",
    "evaluate_band",
    "install_prerequisites",
    "load_config",
    "parse_cover_profile",
    "render_mode_report",
    "resolve_prerequisite",
    "run_mode",
    "write_config",
]
