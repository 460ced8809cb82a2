"""Prerequisite verification and one-shot remediation.

A prerequisite is probed with its help command. When the probe fails the
package URL is fetched once and the probe is repeated once; a second
failure makes the prerequisite unavailable for the owning check.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from core.errors import PrevetPrerequisiteError
from core.execution import CommandExecutor
from core.logging_config import get_logger
from core.types import CheckPrerequisite

_LOGGER = get_logger(__name__)


class Fetcher(Protocol):
    """Install action for a missing prerequisite."""

    def fetch(self, url: str) -> bool: ...


class GoInstallFetcher:
    """Install tool binaries with ``go install <url>@latest``.

    The versioned form builds outside the current module, so the
    repository's ``go.mod`` and ``go.sum`` are left untouched.
    """

    def __init__(self, executor: CommandExecutor, cwd: Path | None = None) -> None:
        self._executor = executor
        self._cwd = cwd

    def fetch(self, url: str) -> bool:
        """Run ``go install`` for one URL and report success."""
        if not url:
            return False
        result = self._executor.execute(("go", "install", f"{url}@latest"), cwd=self._cwd)
        if result.exit_code != 0:
            _LOGGER.warning("prerequisite_fetch_failed", url=url, output=result.output.strip())
            return False
        return True


@dataclass(frozen=True)
class PrerequisiteResolution:
    """How one prerequisite was resolved.

    Attributes:
        prerequisite: The probed prerequisite.
        present: Whether it is usable after resolution.
        remediated: Whether a fetch was attempted.
    """

    prerequisite: CheckPrerequisite
    present: bool
    remediated: bool


def resolve_prerequisite(
    prerequisite: CheckPrerequisite,
    executor: CommandExecutor,
    fetcher: Fetcher,
    cwd: Path | None = None,
    probe_timeout: float | None = None,
) -> PrerequisiteResolution:
    """Probe one prerequisite and remediate it at most once."""
    if prerequisite.is_present(executor, cwd=cwd, timeout=probe_timeout):
        return PrerequisiteResolution(prerequisite=prerequisite, present=True, remediated=False)
    _LOGGER.info(
        "prerequisite_missing",
        help_command=list(prerequisite.help_command),
        url=prerequisite.url,
    )
    if not fetcher.fetch(prerequisite.url):
        return PrerequisiteResolution(prerequisite=prerequisite, present=False, remediated=True)
    present = prerequisite.is_present(executor, cwd=cwd, timeout=probe_timeout)
    if not present:
        _LOGGER.warning(
            "prerequisite_still_missing",
            help_command=list(prerequisite.help_command),
            url=prerequisite.url,
        )
    return PrerequisiteResolution(prerequisite=prerequisite, present=present, remediated=True)


def ensure_prerequisites(
    prerequisites: Sequence[CheckPrerequisite],
    executor: CommandExecutor,
    fetcher: Fetcher,
    cwd: Path | None = None,
    probe_timeout: float | None = None,
) -> tuple[PrerequisiteResolution, ...]:
    """Resolve prerequisites in order, stopping at the first unavailable one.

    Raises:
        PrevetPrerequisiteError: If a prerequisite stays absent after remediation.
    """
    resolutions: list[PrerequisiteResolution] = []
    for prerequisite in prerequisites:
        resolution = resolve_prerequisite(
            prerequisite, executor, fetcher, cwd=cwd, probe_timeout=probe_timeout
        )
        resolutions.append(resolution)
        if not resolution.present:
            raise PrevetPrerequisiteError(
                f"prerequisite unavailable: '{' '.join(prerequisite.help_command)}' "
                f"did not exit with {prerequisite.expected_exit_code} "
                f"after fetching '{prerequisite.url}'."
            )
    return tuple(resolutions)
