"""Shared runtime handed to every check function."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path

from checks.coverage_reporting import CoverageReporter
from checks.prerequisites import Fetcher
from core.errors import PrevetCancelledError
from core.execution import CommandExecutor


@dataclass(frozen=True)
class CheckContext:
    """Collaborators and settings used while running one mode.

    Attributes:
        repo_root: Repository root; commands run from here.
        executor: Process execution capability.
        fetcher: Remediation action for missing prerequisites.
        ignore_patterns: Glob patterns for paths excluded from checks.
        probe_timeout: Time limit for one prerequisite probe.
        reporter: Optional external coverage reporter.
        cancel_event: Set by the mode runner when the budget is exhausted.
    """

    repo_root: Path
    executor: CommandExecutor
    fetcher: Fetcher
    ignore_patterns: tuple[str, ...] = ()
    probe_timeout: float | None = None
    reporter: CoverageReporter | None = None
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def raise_if_cancelled(self) -> None:
        """Stop a check whose mode already ran out of time."""
        if self.cancel_event.is_set():
            raise PrevetCancelledError("check cancelled: mode exceeded its max_duration")
