"""User configured checks running an external program."""

from __future__ import annotations

from checks.context import CheckContext
from checks.outcome import CheckOutcome
from checks.prerequisites import ensure_prerequisites
from core.errors import PrevetCheckError
from core.types import Custom


def run_custom_check(check: Custom, context: CheckContext) -> CheckOutcome:
    """Resolve prerequisites, then run the configured command.

    With ``check_exit_code`` a non-zero exit fails the check. Otherwise only
    a launch failure does. The captured output is the failure detail.

    Raises:
        PrevetPrerequisiteError: If a prerequisite stays unavailable.
        PrevetCheckError: If the command cannot be launched.
    """
    ensure_prerequisites(
        check.prerequisites,
        context.executor,
        context.fetcher,
        cwd=context.repo_root,
        probe_timeout=context.probe_timeout,
    )
    context.raise_if_cancelled()
    result = context.executor.execute(check.command, cwd=context.repo_root)
    if not result.launched:
        raise PrevetCheckError(
            f"could not launch '{check.command[0]}': {result.output.strip()}"
        )
    if check.check_exit_code and result.exit_code != 0:
        return CheckOutcome(passed=False, details=result.output)
    return CheckOutcome(passed=True, details=f"{check.display_name} passed")
