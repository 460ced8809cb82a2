"""Unit tests for prerequisite resolution and remediation."""

from __future__ import annotations

import pytest

from checks.prerequisites import GoInstallFetcher, ensure_prerequisites, resolve_prerequisite
from core.errors import PrevetPrerequisiteError
from core.types import CheckPrerequisite
from tests.fakes import FakeExecutor, FakeFetcher

_PROBE = ("tool", "-help")
_PREREQUISITE = CheckPrerequisite(help_command=_PROBE, expected_exit_code=2, url="example.com/tool")


def test_present_prerequisite_is_not_remediated() -> None:
    """A probe exiting with the expected code needs no fetch."""
    executor = FakeExecutor()
    executor.script(_PROBE, (2, "usage"))
    fetcher = FakeFetcher()

    resolution = resolve_prerequisite(_PREREQUISITE, executor, fetcher)

    assert resolution.present and not resolution.remediated
    assert fetcher.urls == []


def test_missing_prerequisite_is_fetched_once_then_present() -> None:
    """Exit 127, fetch, then exit 2 resolves the prerequisite."""
    executor = FakeExecutor()
    executor.script(_PROBE, (127, "not found"), (2, "usage"))
    fetcher = FakeFetcher()

    resolution = resolve_prerequisite(_PREREQUISITE, executor, fetcher)

    assert resolution.present and resolution.remediated
    assert fetcher.urls == ["example.com/tool"]
    assert executor.count(_PROBE) == 2


def test_still_missing_after_fetch_is_unavailable_without_retry_loop() -> None:
    """Exactly one remediation attempt is made."""
    executor = FakeExecutor()
    executor.script(_PROBE, (127, "not found"))
    fetcher = FakeFetcher()

    with pytest.raises(PrevetPrerequisiteError, match="prerequisite unavailable"):
        ensure_prerequisites([_PREREQUISITE], executor, fetcher)

    assert fetcher.urls == ["example.com/tool"]
    assert executor.count(_PROBE) == 2


def test_failed_fetch_skips_second_probe() -> None:
    """A failed fetch leaves the prerequisite absent."""
    executor = FakeExecutor()
    executor.script(_PROBE, (1, ""))

    resolution = resolve_prerequisite(_PREREQUISITE, executor, FakeFetcher(succeed=False))

    assert not resolution.present and executor.count(_PROBE) == 1


def test_ensure_prerequisites_stops_at_first_unavailable() -> None:
    """Later prerequisites are not probed once one is unavailable."""
    second = CheckPrerequisite(help_command=("linter", "-h"), expected_exit_code=0, url="l")
    executor = FakeExecutor()
    executor.script(_PROBE, (127, ""))
    executor.script(("linter", "-h"), (0, ""))

    with pytest.raises(PrevetPrerequisiteError):
        ensure_prerequisites([_PREREQUISITE, second], executor, FakeFetcher(succeed=False))

    assert executor.count(("linter", "-h")) == 0


def test_go_install_fetcher_reports_exit_status() -> None:
    """go install success maps to True, anything else to False."""
    executor = FakeExecutor()
    executor.script(("go", "install", "ok.example/pkg@latest"), (0, ""))
    executor.script(("go", "install", "bad.example/pkg@latest"), (1, "no such module"))
    fetcher = GoInstallFetcher(executor)

    assert fetcher.fetch("ok.example/pkg")
    assert not fetcher.fetch("bad.example/pkg")
    assert not fetcher.fetch("")


def test_go_install_fetcher_never_runs_go_get() -> None:
    """Remediation installs a versioned binary instead of editing go.mod."""
    executor = FakeExecutor()
    executor.script(("go", "install", "golang.org/x/lint/golint@latest"), (0, ""))

    assert GoInstallFetcher(executor).fetch("golang.org/x/lint/golint")
    assert executor.calls == [("go", "install", "golang.org/x/lint/golint@latest")]
