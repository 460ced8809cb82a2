"""Dispatch from check configuration to check implementation.

The set of check kinds is closed; every kind must have exactly one runner,
and the table is validated when the module is imported.
"""

from __future__ import annotations

from typing import Any, Callable

from checks.context import CheckContext
from checks.coverage_check import run_coverage_check
from checks.custom import run_custom_check
from checks.native import (
    ERRCHECK_PREREQUISITE,
    GOIMPORTS_PREREQUISITE,
    GOLINT_PREREQUISITE,
    run_build_check,
    run_errcheck_check,
    run_gofmt_check,
    run_goimports_check,
    run_golint_check,
    run_govet_check,
    run_test_check,
)
from checks.outcome import CheckOutcome
from checks.prerequisites import ensure_prerequisites
from core.constants import SUPPORTED_CHECK_KINDS
from core.types import CheckConfig, CheckKind, CheckPrerequisite, Custom

CheckRunner = Callable[[Any, CheckContext], CheckOutcome]

_RUNNERS: dict[CheckKind, CheckRunner] = {
    "build": run_build_check,
    "gofmt": run_gofmt_check,
    "test": run_test_check,
    "errcheck": run_errcheck_check,
    "goimports": run_goimports_check,
    "golint": run_golint_check,
    "govet": run_govet_check,
    "coverage": run_coverage_check,
    "custom": run_custom_check,
}
_BUILTIN_PREREQUISITES: dict[CheckKind, tuple[CheckPrerequisite, ...]] = {
    "errcheck": (ERRCHECK_PREREQUISITE,),
    "goimports": (GOIMPORTS_PREREQUISITE,),
    "golint": (GOLINT_PREREQUISITE,),
}

if set(_RUNNERS) != set(SUPPORTED_CHECK_KINDS):
    raise RuntimeError(
        "Check runner table is out of sync with supported kinds: "
        f"{sorted(set(SUPPORTED_CHECK_KINDS) ^ set(_RUNNERS))}"
    )


def prerequisites_for(check: CheckConfig) -> tuple[CheckPrerequisite, ...]:
    """Return the prerequisites a check needs, in resolution order."""
    if isinstance(check, Custom):
        return check.prerequisites
    return _BUILTIN_PREREQUISITES.get(check.kind, ())


def check_title(check: CheckConfig) -> str:
    """Return a short display name for reports."""
    if isinstance(check, Custom):
        return check.display_name
    return check.kind


def run_check(check: CheckConfig, context: CheckContext) -> CheckOutcome:
    """Run one check, resolving built-in prerequisites first."""
    if not isinstance(check, Custom):
        ensure_prerequisites(
            prerequisites_for(check),
            context.executor,
            context.fetcher,
            cwd=context.repo_root,
            probe_timeout=context.probe_timeout,
        )
    return _RUNNERS[check.kind](check, context)
