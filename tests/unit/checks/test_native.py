"""Unit tests for native Go tooling checks."""

from __future__ import annotations

from pathlib import Path

import pytest

from checks.context import CheckContext
from checks.native import (
    filter_messages,
    run_build_check,
    run_errcheck_check,
    run_gofmt_check,
    run_govet_check,
    run_test_check,
)
from checks.registry import check_title, prerequisites_for, run_check
from core.errors import PrevetCheckError, PrevetPrerequisiteError
from core.types import Build, Custom, Errcheck, Gofmt, Golint, Govet, Test
from tests.fakes import FakeExecutor, FakeFetcher


def _context(tmp_path: Path, executor: FakeExecutor) -> CheckContext:
    return CheckContext(
        repo_root=tmp_path,
        executor=executor,
        fetcher=FakeFetcher(succeed=False),
        ignore_patterns=("_*", "*.pb.go"),
    )


def test_build_check_passes_extra_args(tmp_path: Path) -> None:
    """Extra args go before the package pattern."""
    executor = FakeExecutor()
    executor.script(("go", "build", "-tags", "foo", "./..."), (0, ""))

    outcome = run_build_check(Build(extra_args=("-tags", "foo")), _context(tmp_path, executor))

    assert outcome.passed


def test_test_check_surfaces_failure_output(tmp_path: Path) -> None:
    """Failing tests report the go test output."""
    executor = FakeExecutor()
    executor.script(("go", "test", "-short", "./..."), (1, "--- FAIL: TestX\n"))

    outcome = run_test_check(Test(extra_args=("-short",)), _context(tmp_path, executor))

    assert not outcome.passed and "TestX" in outcome.details


def test_gofmt_check_fails_on_listed_files_outside_ignores(tmp_path: Path) -> None:
    """Generated files matching ignore patterns are not reported."""
    executor = FakeExecutor()
    executor.script(("gofmt", "-l", "-s", "."), (0, "api.pb.go\npkg/bad.go\n"))

    outcome = run_gofmt_check(Gofmt(), _context(tmp_path, executor))

    assert not outcome.passed and outcome.details.endswith("pkg/bad.go")


def test_errcheck_check_omits_empty_ignore_flag(tmp_path: Path) -> None:
    """No -ignore flag is passed without a value."""
    executor = FakeExecutor()
    executor.script(("errcheck", "./..."), (0, ""))

    assert run_errcheck_check(Errcheck(), _context(tmp_path, executor)).passed


def test_govet_check_drops_blacklisted_messages(tmp_path: Path) -> None:
    """Only messages outside the blacklist fail the check."""
    executor = FakeExecutor()
    executor.script(
        ("go", "vet", "./..."),
        (1, "# example.com/pkg\npkg/a.go:3: composite literal uses unkeyed fields\n"),
    )

    outcome = run_govet_check(
        Govet(blacklist=("composite literal uses unkeyed fields",)),
        _context(tmp_path, executor),
    )

    assert outcome.passed


def test_native_check_launch_failure_raises(tmp_path: Path) -> None:
    """A missing go binary is a check failure, not a pass."""
    with pytest.raises(PrevetCheckError, match="could not launch"):
        run_build_check(Build(), _context(tmp_path, FakeExecutor()))


def test_filter_messages_keeps_remaining_lines() -> None:
    """Blank lines and package headers are not messages."""
    assert filter_messages("# pkg\n\na.go:1: x\nb.go:2: y\n", ("y",)) == ["a.go:1: x"]


def test_run_check_resolves_builtin_prerequisite_first(tmp_path: Path) -> None:
    """golint needs its tool; an unavailable tool fails before linting."""
    executor = FakeExecutor()
    executor.script(("golint", "-h"), (127, ""))

    with pytest.raises(PrevetPrerequisiteError):
        run_check(Golint(), _context(tmp_path, executor))

    assert executor.count(("golint", "./...")) == 0


def test_registry_titles_and_prerequisites() -> None:
    """Custom checks use their display name and own prerequisites."""
    custom = Custom(display_name="mine", command=("x",))

    assert check_title(custom) == "mine" and check_title(Build()) == "build"
    assert prerequisites_for(Build()) == ()
    assert prerequisites_for(Errcheck())[0].help_command == ("errcheck", "-h")
