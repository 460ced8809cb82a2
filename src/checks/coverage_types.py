"""Typed models for coverage samples and coverage verdicts."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Literal, Mapping

from core.constants import ROOT_DIRECTORY
from core.types import CoverageSettings

BandFailure = Literal["below_min", "above_max"]
GLOBAL_SCOPE = "global"


@dataclass(frozen=True)
class CoverageBlock:
    """One instrumented source range from a coverage profile.

    Attributes:
        file_path: Repository-relative POSIX path of the source file.
        start_line: First line of the block.
        start_column: First column of the block.
        end_line: Last line of the block.
        end_column: Last column of the block.
        statements: Number of statements in the block.
        hits: Execution count observed by the producing test.
    """

    file_path: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    statements: int
    hits: int

    @property
    def key(self) -> tuple[str, int, int, int, int]:
        """Identity of the block across samples."""
        return (self.file_path, self.start_line, self.start_column, self.end_line, self.end_column)

    @property
    def directory(self) -> str:
        """Directory containing the block's source file."""
        return posixpath.dirname(self.file_path) or ROOT_DIRECTORY


@dataclass(frozen=True)
class CoverageSample:
    """Coverage produced by running one package's tests."""

    test_package: str
    blocks: tuple[CoverageBlock, ...]


@dataclass(frozen=True)
class FileCoverage:
    """Merged per-file statement coverage."""

    file_path: str
    covered_statements: int
    total_statements: int

    @property
    def percentage(self) -> float:
        """Covered share of statements in percent."""
        return percentage_of(self.covered_statements, self.total_statements)


@dataclass(frozen=True)
class ScopeVerdict:
    """Band evaluation for the global scope or one directory."""

    scope: str
    is_global: bool
    percentage: float
    band: CoverageSettings
    exempt: bool
    failure: BandFailure | None

    @property
    def passed(self) -> bool:
        """Whether the percentage fits the band."""
        return self.failure is None

    def describe(self) -> str:
        """Render one stable line for reports."""
        label = "global" if self.is_global else self.scope
        band = f"[{self.band.min_coverage:.1f}, {self.band.max_coverage:.1f}]"
        if self.exempt:
            return f"{label}: {self.percentage:.1f}% (exempt)"
        if self.failure == "below_min":
            return f"{label}: {self.percentage:.1f}% is below minimum of band {band}"
        if self.failure == "above_max":
            return (
                f"{label}: {self.percentage:.1f}% is above maximum of band {band}; "
                "raise the band"
            )
        return f"{label}: {self.percentage:.1f}% within band {band}"


@dataclass(frozen=True)
class CoverageReport:
    """Full aggregation result for one Coverage check."""

    global_percentage: float
    directory_percentages: Mapping[str, float]
    files: tuple[FileCoverage, ...]
    verdicts: tuple[ScopeVerdict, ...]

    @property
    def failures(self) -> tuple[ScopeVerdict, ...]:
        """Every scope that violated its band."""
        return tuple(verdict for verdict in self.verdicts if not verdict.passed)

    @property
    def passed(self) -> bool:
        """Whether the global band and every directory band passed."""
        return not self.failures


def percentage_of(covered: int, total: int) -> float:
    """Return covered/total in percent, or 0.0 when nothing is instrumented."""
    if total <= 0:
        return 0.0
    return covered * 100.0 / total
