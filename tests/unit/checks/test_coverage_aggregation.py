"""Unit tests for coverage aggregation and band evaluation."""

from __future__ import annotations

import pytest

from checks.coverage_aggregation import aggregate_coverage, evaluate_band
from checks.coverage_types import CoverageBlock, CoverageSample
from core.types import Coverage, CoverageSettings


def _block(file_path: str, line: int, statements: int, hits: int) -> CoverageBlock:
    return CoverageBlock(
        file_path=file_path,
        start_line=line,
        start_column=1,
        end_line=line + 1,
        end_column=2,
        statements=statements,
        hits=hits,
    )


def _sample(package: str, covered: int, total: int, file_path: str | None = None) -> CoverageSample:
    path = file_path or f"{package}/code.go"
    blocks = [_block(path, line, 1, 1 if line <= covered else 0) for line in range(1, total + 1)]
    return CoverageSample(test_package=package, blocks=tuple(blocks))


def test_scenario_exempt_directory_and_inherited_default() -> None:
    """pkgA 8/10 and pkgB 0/5 give 53.3% globally; pkgB exempt, pkgA passes."""
    coverage = Coverage(
        global_band=CoverageSettings(min_coverage=50, max_coverage=100),
        per_dir_default=CoverageSettings(min_coverage=70, max_coverage=100),
        per_dir={"pkgB": CoverageSettings(min_coverage=0, max_coverage=0)},
    )

    report = aggregate_coverage([_sample("pkgA", 8, 10), _sample("pkgB", 0, 5)], coverage)
    verdicts = {verdict.scope: verdict for verdict in report.verdicts}

    assert report.global_percentage == pytest.approx(53.333, abs=0.01)
    assert report.passed
    assert verdicts["pkgB"].exempt and verdicts["pkgB"].percentage == 0.0
    assert verdicts["pkgA"].percentage == pytest.approx(80.0)


def test_all_failing_scopes_are_reported() -> None:
    """Every offending directory is listed, not only the first one."""
    coverage = Coverage(
        global_band=CoverageSettings(min_coverage=90, max_coverage=0),
        per_dir_default=CoverageSettings(min_coverage=50, max_coverage=70),
    )
    samples = [_sample("low", 1, 4), _sample("high", 9, 10), _sample("ok", 6, 10)]

    report = aggregate_coverage(samples, coverage)
    failures = {verdict.scope: verdict.failure for verdict in report.failures}

    assert failures == {"global": "below_min", "low": "below_min", "high": "above_max"}
    assert not report.passed


def test_global_percentage_ignores_global_inference_flag() -> None:
    """Only per-directory attribution changes with global inference."""
    integration = CoverageSample(
        test_package="api",
        blocks=(_block("api/handler.go", 1, 2, 1), _block("store/db.go", 1, 4, 1)),
    )
    unit = CoverageSample(
        test_package="store",
        blocks=(_block("store/db.go", 1, 4, 0), _block("store/db.go", 5, 4, 0)),
    )
    local = aggregate_coverage([integration, unit], Coverage(use_global_inference=False))
    inferred = aggregate_coverage([integration, unit], Coverage(use_global_inference=True))

    assert local.global_percentage == inferred.global_percentage == pytest.approx(60.0)
    assert local.directory_percentages["store"] == pytest.approx(0.0)
    assert inferred.directory_percentages["store"] == pytest.approx(50.0)


def test_directories_without_own_tests_are_excluded_without_inference() -> None:
    """Untested directories are not reported as 0%."""
    sample = CoverageSample(
        test_package="api",
        blocks=(_block("api/handler.go", 1, 2, 1), _block("util/strings.go", 1, 3, 1)),
    )

    local = aggregate_coverage([sample], Coverage(use_global_inference=False))
    inferred = aggregate_coverage([sample], Coverage(use_global_inference=True))

    assert set(local.directory_percentages) == {"api"}
    assert set(inferred.directory_percentages) == {"api", "util"}


def test_root_directory_is_reported_as_dot() -> None:
    """Files at the repository root belong to '.'."""
    report = aggregate_coverage([_sample(".", 1, 2, file_path="main.go")], Coverage())

    assert report.directory_percentages == {".": pytest.approx(50.0)}


def test_per_file_detail_merges_duplicate_blocks() -> None:
    """A block covered by any sample counts once as covered."""
    first = CoverageSample(test_package="a", blocks=(_block("a/x.go", 1, 3, 0),))
    second = CoverageSample(test_package="b", blocks=(_block("a/x.go", 1, 3, 2),))

    report = aggregate_coverage([first, second], Coverage(use_global_inference=True))

    assert [(row.file_path, row.covered_statements, row.total_statements) for row in report.files] == [
        ("a/x.go", 3, 3)
    ]


def test_no_samples_yields_zero_global_percentage() -> None:
    """Nothing instrumented means 0% globally and no directories."""
    report = aggregate_coverage([], Coverage(global_band=CoverageSettings(min_coverage=10)))

    assert report.global_percentage == 0.0 and not report.passed


@pytest.mark.parametrize("percentage", [40.0, 73.5, 100.0])
def test_unbounded_band_passes_everything_above_min(percentage: float) -> None:
    """A zero max never fails from above."""
    assert evaluate_band(percentage, CoverageSettings(min_coverage=40, max_coverage=0)) is None


@pytest.mark.parametrize("percentage", [0.0, 12.5, 100.0])
def test_exempt_band_passes_everything(percentage: float) -> None:
    """Both bounds at zero never fail."""
    assert evaluate_band(percentage, CoverageSettings()) is None


def test_band_reports_stale_maximum() -> None:
    """Exceeding a non-zero max asks for the band to be raised."""
    assert evaluate_band(95.0, CoverageSettings(min_coverage=50, max_coverage=90)) == "above_max"
