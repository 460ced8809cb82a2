"""Native Go tooling checks.

Each native check maps to one command run from the repository root.
Formatting checks fail when they list files; lint checks fail on any
message left after dropping blacklisted ones.
"""

from __future__ import annotations

from typing import Sequence

from checks.context import CheckContext
from checks.outcome import CheckOutcome
from checks.packages import is_ignored
from core.errors import PrevetCheckError
from core.execution import CommandResult
from core.types import (
    Build,
    CheckPrerequisite,
    Errcheck,
    Gofmt,
    Goimports,
    Golint,
    Govet,
    Test,
)

ERRCHECK_PREREQUISITE = CheckPrerequisite(
    help_command=("errcheck", "-h"),
    expected_exit_code=2,
    url="github.com/kisielk/errcheck",
)
GOIMPORTS_PREREQUISITE = CheckPrerequisite(
    help_command=("goimports", "-h"),
    expected_exit_code=2,
    url="golang.org/x/tools/cmd/goimports",
)
GOLINT_PREREQUISITE = CheckPrerequisite(
    help_command=("golint", "-h"),
    expected_exit_code=2,
    url="golang.org/x/lint/golint",
)


def run_build_check(check: Build, context: CheckContext) -> CheckOutcome:
    """Build every package."""
    result = _run(("go", "build", *check.extra_args, "./..."), context)
    return _exit_code_outcome(result, "build succeeded")


def run_test_check(check: Test, context: CheckContext) -> CheckOutcome:
    """Run every test."""
    result = _run(("go", "test", *check.extra_args, "./..."), context)
    return _exit_code_outcome(result, "tests passed")


def run_gofmt_check(check: Gofmt, context: CheckContext) -> CheckOutcome:
    """Fail when gofmt would rewrite any file."""
    _ = check
    result = _run(("gofmt", "-l", "-s", "."), context)
    return _listed_files_outcome(result, context, "gofmt")


def run_goimports_check(check: Goimports, context: CheckContext) -> CheckOutcome:
    """Fail when goimports would rewrite any file."""
    _ = check
    result = _run(("goimports", "-l", "."), context)
    return _listed_files_outcome(result, context, "goimports")


def run_errcheck_check(check: Errcheck, context: CheckContext) -> CheckOutcome:
    """Fail on unchecked errors."""
    argv: list[str] = ["errcheck"]
    if check.ignores:
        argv.extend(("-ignore", check.ignores))
    argv.append("./...")
    result = _run(argv, context)
    return _exit_code_outcome(result, "no unchecked errors")


def run_golint_check(check: Golint, context: CheckContext) -> CheckOutcome:
    """Fail on any golint message outside the blacklist."""
    result = _run(("golint", "./..."), context)
    return _message_outcome(result, check.blacklist, "golint")


def run_govet_check(check: Govet, context: CheckContext) -> CheckOutcome:
    """Fail on any vet message outside the blacklist."""
    result = _run(("go", "vet", "./..."), context)
    return _message_outcome(result, check.blacklist, "go vet")


def filter_messages(output: str, blacklist: Sequence[str]) -> list[str]:
    """Drop empty lines, package headers, and blacklisted messages."""
    messages: list[str] = []
    for line in output.splitlines():
        stripped = line.rstrip()
        if not stripped or stripped.startswith("#"):
            continue
        if any(entry in stripped for entry in blacklist):
            continue
        messages.append(stripped)
    return messages


def _run(argv: Sequence[str], context: CheckContext) -> CommandResult:
    context.raise_if_cancelled()
    result = context.executor.execute(argv, cwd=context.repo_root)
    if not result.launched:
        raise PrevetCheckError(f"could not launch '{argv[0]}': {result.output.strip()}")
    return result


def _exit_code_outcome(result: CommandResult, success_details: str) -> CheckOutcome:
    if result.exit_code != 0:
        return CheckOutcome(passed=False, details=result.output.strip())
    return CheckOutcome(passed=True, details=success_details)


def _listed_files_outcome(
    result: CommandResult,
    context: CheckContext,
    tool_name: str,
) -> CheckOutcome:
    if result.exit_code != 0:
        return CheckOutcome(passed=False, details=result.output.strip())
    listed = [
        line.strip()
        for line in result.output.splitlines()
        if line.strip() and not is_ignored(line.strip(), context.ignore_patterns)
    ]
    if listed:
        return CheckOutcome(
            passed=False,
            details=f"{tool_name} would reformat:\n" + "\n".join(listed),
        )
    return CheckOutcome(passed=True, details="all files formatted")


def _message_outcome(
    result: CommandResult,
    blacklist: Sequence[str],
    tool_name: str,
) -> CheckOutcome:
    messages = filter_messages(result.output, blacklist)
    if messages:
        return CheckOutcome(passed=False, details="\n".join(messages))
    return CheckOutcome(passed=True, details=f"{tool_name} reported nothing")
