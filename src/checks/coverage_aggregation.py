"""Coverage aggregation and band evaluation.

Samples from every tested package are merged block by block (a block is
covered when any sample executed it) and reduced into one global
percentage plus one percentage per directory holding instrumented code.

Without global inference a directory only counts coverage produced by its
own tests, and directories without tests are left out. With global
inference a directory counts every sample that touched its code. The
global percentage always uses every sample.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Sequence

from checks.coverage_types import (
    GLOBAL_SCOPE,
    BandFailure,
    CoverageBlock,
    CoverageReport,
    CoverageSample,
    FileCoverage,
    ScopeVerdict,
    percentage_of,
)
from core.types import Coverage, CoverageSettings


@dataclass(frozen=True)
class _MergedBlock:
    directory: str
    file_path: str
    statements: int
    covered: bool


def aggregate_coverage(samples: Sequence[CoverageSample], coverage: Coverage) -> CoverageReport:
    """Merge samples and evaluate every configured band.

    Args:
        samples: One sample per tested package, all runs completed.
        coverage: Coverage check configuration.

    Returns:
        Report with percentages and one verdict per scope.
    """
    merged_all = _merge_blocks(block for sample in samples for block in sample.blocks)
    global_percentage = _percentage(merged_all.values())
    if coverage.use_global_inference:
        directory_percentages = _directory_percentages(merged_all.values())
    else:
        directory_percentages = _own_test_percentages(samples)
    verdicts = [
        ScopeVerdict(
            scope=GLOBAL_SCOPE,
            is_global=True,
            percentage=global_percentage,
            band=coverage.global_band,
            exempt=False,
            failure=evaluate_band(global_percentage, coverage.global_band),
        )
    ]
    for directory in sorted(directory_percentages):
        percentage = directory_percentages[directory]
        band = coverage.band_for(directory)
        verdicts.append(
            ScopeVerdict(
                scope=directory,
                is_global=False,
                percentage=percentage,
                band=band,
                exempt=band.is_exempt,
                failure=None if band.is_exempt else evaluate_band(percentage, band),
            )
        )
    return CoverageReport(
        global_percentage=global_percentage,
        directory_percentages=directory_percentages,
        files=_file_breakdown(merged_all.values()),
        verdicts=tuple(verdicts),
    )


def evaluate_band(percentage: float, band: CoverageSettings) -> BandFailure | None:
    """Return why a percentage violates a band, or None when it fits."""
    if percentage < band.min_coverage:
        return "below_min"
    if band.max_coverage > 0 and percentage > band.max_coverage:
        return "above_max"
    return None


def _merge_blocks(blocks: Iterable[CoverageBlock]) -> dict[tuple[str, int, int, int, int], _MergedBlock]:
    merged: dict[tuple[str, int, int, int, int], _MergedBlock] = {}
    for block in blocks:
        previous = merged.get(block.key)
        covered = block.hits > 0
        statements = block.statements
        if previous is not None:
            covered = covered or previous.covered
            statements = max(statements, previous.statements)
        merged[block.key] = _MergedBlock(
            directory=block.directory,
            file_path=block.file_path,
            statements=statements,
            covered=covered,
        )
    return merged


def _own_test_percentages(samples: Sequence[CoverageSample]) -> dict[str, float]:
    blocks_by_package: dict[str, list[CoverageBlock]] = defaultdict(list)
    for sample in samples:
        blocks_by_package[sample.test_package].extend(
            block for block in sample.blocks if block.directory == sample.test_package
        )
    percentages: dict[str, float] = {}
    for package, blocks in blocks_by_package.items():
        merged = _merge_blocks(blocks)
        if _total(merged.values()) > 0:
            percentages[package] = _percentage(merged.values())
    return percentages


def _directory_percentages(blocks: Iterable[_MergedBlock]) -> dict[str, float]:
    covered: dict[str, int] = defaultdict(int)
    total: dict[str, int] = defaultdict(int)
    for block in blocks:
        total[block.directory] += block.statements
        if block.covered:
            covered[block.directory] += block.statements
    return {
        directory: percentage_of(covered[directory], statements)
        for directory, statements in total.items()
        if statements > 0
    }


def _file_breakdown(blocks: Iterable[_MergedBlock]) -> tuple[FileCoverage, ...]:
    covered: dict[str, int] = defaultdict(int)
    total: dict[str, int] = defaultdict(int)
    for block in blocks:
        total[block.file_path] += block.statements
        if block.covered:
            covered[block.file_path] += block.statements
    return tuple(
        FileCoverage(
            file_path=file_path,
            covered_statements=covered[file_path],
            total_statements=total[file_path],
        )
        for file_path in sorted(total)
    )


def _total(blocks: Iterable[_MergedBlock]) -> int:
    return sum(block.statements for block in blocks)


def _percentage(blocks: Iterable[_MergedBlock]) -> float:
    rows = list(blocks)
    covered = sum(block.statements for block in rows if block.covered)
    return percentage_of(covered, _total(rows))
