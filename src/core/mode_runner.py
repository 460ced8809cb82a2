"""Mode orchestration and report formatting.

Checks of one mode run concurrently on a thread pool. The mode's
``max_duration`` is a wall-clock budget for the whole batch: when it runs
out, live processes are terminated, unfinished checks are reported as
cancelled, and the mode is reported as timed out.
"""

from __future__ import annotations

import json
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path

from checks.context import CheckContext
from checks.coverage_reporting import CoverallsReporter
from checks.outcome import CheckOutcome
from checks.prerequisites import GoInstallFetcher, PrerequisiteResolution, resolve_prerequisite
from checks.registry import check_title, prerequisites_for, run_check
from core.config import RuntimeConfig
from core.constants import REPORT_FILE_NAME
from core.errors import PrevetCancelledError
from core.execution import SubprocessExecutor
from core.logging_config import get_logger
from core.run_types import CheckResult, CheckStatus, ModeReport
from core.types import CheckConfig, CheckPrerequisite, Config

__all__ = [
    "CheckResult",
    "ModeReport",
    "build_check_context",
    "install_prerequisites",
    "render_mode_report",
    "run_mode",
    "save_mode_report",
]

_LOGGER = get_logger(__name__)


def build_check_context(
    runtime: RuntimeConfig,
    repo_root: Path,
    ignore_patterns: tuple[str, ...],
) -> CheckContext:
    """Wire real collaborators for a run from the working tree."""
    executor = SubprocessExecutor()
    return CheckContext(
        repo_root=repo_root,
        executor=executor,
        fetcher=GoInstallFetcher(executor, cwd=repo_root),
        ignore_patterns=ignore_patterns,
        probe_timeout=runtime.probe_timeout_seconds,
        reporter=CoverallsReporter(runtime.coveralls_repo_token, runtime.coveralls_endpoint),
    )


def run_mode(
    config: Config,
    mode_name: str,
    context: CheckContext,
    max_workers: int,
) -> ModeReport:
    """Run every check of one mode and return a structured report.

    Raises:
        PrevetConfigError: If the mode is not configured. No check runs.
        PrevetCancelledError: If the context was cancelled by an earlier
            timed-out run. Build a fresh one with ``build_check_context``.
    """
    mode = config.mode(mode_name)
    if context.cancel_event.is_set():
        raise PrevetCancelledError(
            "check context was cancelled by an earlier timed-out run; build a new context"
        )
    checks = tuple(mode.iter_checks())
    budget = mode.max_duration if mode.max_duration > 0 else None
    _LOGGER.info("mode_started", mode=mode_name, checks=len(checks), max_duration=budget)
    started_at = time.monotonic()
    pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="prevet-check")
    futures: list[Future[CheckResult]] = [
        pool.submit(_run_single_check, f"C{index + 1:03d}", check, context)
        for index, check in enumerate(checks)
    ]
    _, not_done = wait(futures, timeout=budget)
    duration = time.monotonic() - started_at
    timed_out = bool(not_done) or (budget is not None and duration > budget)
    if not_done:
        context.cancel_event.set()
        context.executor.terminate_all()
        _LOGGER.warning("mode_timed_out", mode=mode_name, max_duration=budget, unfinished=len(not_done))
    pool.shutdown(wait=False, cancel_futures=True)
    results = tuple(
        future.result() if future not in not_done else _cancelled_result(index, check, budget)
        for index, (future, check) in enumerate(zip(futures, checks))
    )
    report = ModeReport(
        mode=mode_name,
        max_duration=mode.max_duration,
        duration_seconds=round(duration, 3),
        timed_out=timed_out,
        checks=results,
    )
    _LOGGER.info(
        "mode_finished",
        mode=mode_name,
        status=report.status,
        passed=report.passed_count,
        failed=report.failed_count,
        cancelled=report.cancelled_count,
    )
    return report


def install_prerequisites(
    config: Config,
    mode_name: str,
    context: CheckContext,
) -> tuple[PrerequisiteResolution, ...]:
    """Resolve every distinct prerequisite of a mode, continuing past failures."""
    mode = config.mode(mode_name)
    seen: set[CheckPrerequisite] = set()
    resolutions: list[PrerequisiteResolution] = []
    for check in mode.iter_checks():
        for prerequisite in prerequisites_for(check):
            if prerequisite in seen:
                continue
            seen.add(prerequisite)
            resolutions.append(
                resolve_prerequisite(
                    prerequisite,
                    context.executor,
                    context.fetcher,
                    cwd=context.repo_root,
                    probe_timeout=context.probe_timeout,
                )
            )
    return tuple(resolutions)


def _run_single_check(check_id: str, check: CheckConfig, context: CheckContext) -> CheckResult:
    started_at = time.monotonic()
    status: CheckStatus
    try:
        outcome = run_check(check, context)
        status = "passed" if outcome.passed else "failed"
    except PrevetCancelledError as error:
        outcome = CheckOutcome(passed=False, details=str(error))
        status = "cancelled"
    except Exception as error:
        _LOGGER.error("check_errored", check_id=check_id, kind=check.kind, error=str(error))
        outcome = CheckOutcome(passed=False, details=str(error))
        status = "failed"
    return CheckResult(
        check_id=check_id,
        kind=check.kind,
        title=check_title(check),
        status=status,
        details=outcome.details,
        duration_seconds=round(time.monotonic() - started_at, 3),
        coverage=outcome.coverage,
    )


def _cancelled_result(index: int, check: CheckConfig, budget: float | None) -> CheckResult:
    return CheckResult(
        check_id=f"C{index + 1:03d}",
        kind=check.kind,
        title=check_title(check),
        status="cancelled",
        details=f"cancelled: mode exceeded max_duration of {budget}s",
        duration_seconds=0.0 if budget is None else float(budget),
    )


def render_mode_report(report: ModeReport) -> str:
    """Render report into stable multi-line text for CLI output."""
    lines = [
        f"mode={report.mode}",
        f"status={report.status}",
        f"duration={report.duration_seconds:.3f}s max_duration={report.max_duration:g}s",
    ]
    for row in report.checks:
        lines.append(
            f"[{row.status.upper()}] {row.check_id} {row.title} "
            f"({row.duration_seconds:.3f}s) :: {row.details}"
        )
    if report.timed_out:
        lines.append("mode ran too slow: exceeded max_duration")
    lines.append(f"passed={report.passed_count}")
    lines.append(f"failed={report.failed_count}")
    lines.append(f"cancelled={report.cancelled_count}")
    return "\n".join(lines)


def save_mode_report(report: ModeReport, output_dir: Path) -> Path:
    """Persist report JSON for CI consumption."""
    report_path = output_dir / REPORT_FILE_NAME
    report_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "mode": report.mode,
        "status": report.status,
        "max_duration": report.max_duration,
        "duration_seconds": report.duration_seconds,
        "timed_out": report.timed_out,
        "checks": [
            {
                "check_id": row.check_id,
                "kind": row.kind,
                "title": row.title,
                "status": row.status,
                "details": row.details,
                "duration_seconds": row.duration_seconds,
                "coverage_failures": [
                    {
                        "scope": verdict.scope,
                        "percentage": round(verdict.percentage, 2),
                        "min_coverage": verdict.band.min_coverage,
                        "max_coverage": verdict.band.max_coverage,
                        "failure": verdict.failure,
                    }
                    for verdict in row.coverage_failures
                ],
            }
            for row in report.checks
        ],
    }
    report_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return report_path
