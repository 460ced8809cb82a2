"""Typed models for mode runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from checks.coverage_types import CoverageReport, ScopeVerdict
from core.types import CheckKind

CheckStatus = Literal["passed", "failed", "cancelled"]
ModeStatus = Literal["passed", "failed", "timeout"]


@dataclass(frozen=True)
class CheckResult:
    """One check result row."""

    check_id: str
    kind: CheckKind
    title: str
    status: CheckStatus
    details: str
    duration_seconds: float
    coverage: CoverageReport | None = None

    @property
    def coverage_failures(self) -> tuple[ScopeVerdict, ...]:
        """Offending coverage scopes, empty for other kinds."""
        return () if self.coverage is None else self.coverage.failures


@dataclass(frozen=True)
class ModeReport:
    """Final report for one mode run."""

    mode: str
    max_duration: float
    duration_seconds: float
    timed_out: bool
    checks: tuple[CheckResult, ...]

    @property
    def status(self) -> ModeStatus:
        """Mode verdict. Cancelled checks count as a timeout, never as a pass."""
        if self.timed_out or self.cancelled_count > 0:
            return "timeout"
        if self.failed_count > 0:
            return "failed"
        return "passed"

    @property
    def failed_count(self) -> int:
        """Count failed checks in this report."""
        return sum(1 for check in self.checks if check.status == "failed")

    @property
    def passed_count(self) -> int:
        """Count passed checks in this report."""
        return sum(1 for check in self.checks if check.status == "passed")

    @property
    def cancelled_count(self) -> int:
        """Count checks stopped by the mode budget."""
        return sum(1 for check in self.checks if check.status == "cancelled")
