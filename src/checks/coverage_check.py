"""Coverage check execution.

Every tested package runs ``go test`` with a cover profile. Aggregation
starts only after all packages finished, and never after the mode was
cancelled, so a timed-out run cannot yield a passing coverage verdict.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from checks.context import CheckContext
from checks.coverage_aggregation import aggregate_coverage
from checks.coverage_profile import parse_cover_profile, require_module_path
from checks.coverage_types import CoverageReport, CoverageSample
from checks.outcome import CheckOutcome
from checks.packages import GoPackage, find_go_packages
from core.errors import PrevetCheckError
from core.logging_config import get_logger
from core.types import Coverage

_LOGGER = get_logger(__name__)


def run_coverage_check(check: Coverage, context: CheckContext) -> CheckOutcome:
    """Collect samples, aggregate them, and evaluate every band."""
    packages = [
        package
        for package in find_go_packages(context.repo_root, context.ignore_patterns)
        if package.has_tests
    ]
    samples = collect_coverage_samples(check, packages, context)
    context.raise_if_cancelled()
    report = aggregate_coverage(samples, check)
    if check.use_coveralls:
        _report_externally(report, context)
    return CheckOutcome(
        passed=report.passed,
        details=render_coverage_details(report),
        coverage=report,
    )


def collect_coverage_samples(
    check: Coverage,
    packages: list[GoPackage],
    context: CheckContext,
) -> tuple[CoverageSample, ...]:
    """Run each tested package once and parse its cover profile."""
    module_path = require_module_path(context.repo_root)
    samples: list[CoverageSample] = []
    with tempfile.TemporaryDirectory(prefix="prevet-cover-") as temp_dir:
        for index, package in enumerate(packages):
            context.raise_if_cancelled()
            profile_path = Path(temp_dir) / f"profile-{index}.out"
            argv = ["go", "test", "-covermode=count", f"-coverprofile={profile_path}"]
            if check.use_global_inference:
                argv.append("-coverpkg=./...")
            argv.append(package.target)
            result = context.executor.execute(argv, cwd=context.repo_root)
            if result.exit_code != 0:
                raise PrevetCheckError(
                    f"go test failed for {package.directory}:\n{result.output.strip()}"
                )
            profile_text = (
                profile_path.read_text(encoding="utf-8") if profile_path.exists() else ""
            )
            samples.append(parse_cover_profile(profile_text, package.directory, module_path))
    return tuple(samples)


def render_coverage_details(report: CoverageReport) -> str:
    """Summarize a report, listing every offending scope."""
    if report.passed:
        return f"coverage {report.global_percentage:.1f}%"
    rows = [f"coverage {report.global_percentage:.1f}%; failing scopes:"]
    rows.extend(f"  {verdict.describe()}" for verdict in report.failures)
    return "\n".join(rows)


def _report_externally(report: CoverageReport, context: CheckContext) -> None:
    if context.reporter is None:
        _LOGGER.warning("coverage_reporter_missing")
        return
    try:
        accepted = context.reporter.report(report.global_percentage, report.files)
    except Exception as error:
        _LOGGER.warning("coverage_report_errored", error=str(error))
        return
    if not accepted:
        _LOGGER.warning(
            "coverage_report_rejected",
            global_percentage=round(report.global_percentage, 2),
        )
