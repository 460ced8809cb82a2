"""Result of one check function."""

from __future__ import annotations

from dataclasses import dataclass

from checks.coverage_types import CoverageReport


@dataclass(frozen=True)
class CheckOutcome:
    """Verdict returned by a check function.

    Attributes:
        passed: Whether the check passed.
        details: Human-readable detail, the captured output on failure.
        coverage: Aggregated coverage for Coverage checks.
    """

    passed: bool
    details: str
    coverage: CoverageReport | None = None
