"""Shared typed models.

This module defines the immutable configuration records loaded from
``prevet.yml``: the root config, modes, and the closed family of check
configurations keyed by check kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Iterator, Literal, Mapping, Union

from core.constants import MAX_COVERAGE_PERCENT, MIN_COVERAGE_PERCENT
from core.errors import PrevetConfigError
from core.execution import CommandExecutor, SubprocessExecutor

ModeName = Literal["pre-commit", "pre-push", "continuous-integration", "lint"]
CheckKind = Literal[
    "build",
    "gofmt",
    "test",
    "errcheck",
    "goimports",
    "golint",
    "govet",
    "coverage",
    "custom",
]


@dataclass(frozen=True)
class CheckPrerequisite:
    """External tool a check needs before it can run.

    Attributes:
        help_command: Fast, side-effect-free probe command.
        expected_exit_code: Exit code the probe returns when the tool exists.
        url: Package location fetched when the probe fails.
    """

    help_command: tuple[str, ...]
    expected_exit_code: int
    url: str

    def __post_init__(self) -> None:
        if not self.help_command:
            raise PrevetConfigError("Prerequisite 'help_command' must not be empty.")

    def is_present(
        self,
        executor: CommandExecutor | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> bool:
        """Return True when the probe exits with exactly the expected code.

        A probe that cannot be launched counts as absent.
        """
        runner = executor if executor is not None else SubprocessExecutor()
        result = runner.execute(self.help_command, cwd=cwd or Path.cwd(), timeout=timeout)
        return result.exit_code is not None and result.exit_code == self.expected_exit_code


@dataclass(frozen=True)
class CoverageSettings:
    """Acceptable coverage band for one scope, in percent.

    A ``max_coverage`` of zero is not enforced. Both bounds at zero exempt
    the scope from banding entirely.
    """

    min_coverage: float = 0.0
    max_coverage: float = 0.0

    def __post_init__(self) -> None:
        for name, value in (
            ("min_coverage", self.min_coverage),
            ("max_coverage", self.max_coverage),
        ):
            if not MIN_COVERAGE_PERCENT <= value <= MAX_COVERAGE_PERCENT:
                raise PrevetConfigError(
                    f"Coverage field '{name}' must be within 0-100, got {value}."
                )
        if self.max_coverage > 0 and self.min_coverage > self.max_coverage:
            raise PrevetConfigError(
                f"Coverage band is inverted: min_coverage {self.min_coverage} "
                f"exceeds max_coverage {self.max_coverage}."
            )

    @property
    def is_exempt(self) -> bool:
        """Whether this band disables enforcement."""
        return self.min_coverage == 0 and self.max_coverage == 0


@dataclass(frozen=True)
class Build:
    """Build everything with ``go build ./...``."""

    kind: ClassVar[CheckKind] = "build"
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class Gofmt:
    """Run gofmt in list mode with simplification."""

    kind: ClassVar[CheckKind] = "gofmt"


@dataclass(frozen=True)
class Test:
    """Run all tests with ``go test``."""

    __test__ = False
    kind: ClassVar[CheckKind] = "test"
    extra_args: tuple[str, ...] = ()


@dataclass(frozen=True)
class Errcheck:
    """Run errcheck with an optional ``-ignore`` value."""

    kind: ClassVar[CheckKind] = "errcheck"
    ignores: str = ""


@dataclass(frozen=True)
class Goimports:
    """Run goimports in list mode."""

    kind: ClassVar[CheckKind] = "goimports"


@dataclass(frozen=True)
class Golint:
    """Run golint, dropping messages that contain a blacklisted string."""

    kind: ClassVar[CheckKind] = "golint"
    blacklist: tuple[str, ...] = ()


@dataclass(frozen=True)
class Govet:
    """Run go vet, dropping messages that contain a blacklisted string."""

    kind: ClassVar[CheckKind] = "govet"
    blacklist: tuple[str, ...] = ()


@dataclass(frozen=True)
class Coverage:
    """Run all tests with coverage and evaluate coverage bands.

    Attributes:
        use_global_inference: Credit coverage from any test to every directory
            whose code it exercises.
        use_coveralls: Hand merged results to the external reporter.
        global_band: Band for the whole repository.
        per_dir_default: Band for directories without an override.
        per_dir: Directory overrides. A ``None`` value means no override.
    """

    kind: ClassVar[CheckKind] = "coverage"
    use_global_inference: bool = False
    use_coveralls: bool = False
    global_band: CoverageSettings = field(default_factory=CoverageSettings)
    per_dir_default: CoverageSettings = field(default_factory=CoverageSettings)
    per_dir: Mapping[str, CoverageSettings | None] = field(default_factory=dict)

    def band_for(self, directory: str) -> CoverageSettings:
        """Resolve the band for one directory by exact path match."""
        override = self.per_dir.get(directory)
        return override if override is not None else self.per_dir_default


@dataclass(frozen=True)
class Custom:
    """User configured check running an external program."""

    kind: ClassVar[CheckKind] = "custom"
    display_name: str
    command: tuple[str, ...]
    description: str = ""
    check_exit_code: bool = False
    prerequisites: tuple[CheckPrerequisite, ...] = ()


CheckConfig = Union[Build, Gofmt, Test, Errcheck, Goimports, Golint, Govet, Coverage, Custom]


@dataclass(frozen=True)
class Mode:
    """Named bundle of checks sharing one wall-clock budget.

    Attributes:
        checks: Check configurations grouped by kind, in declaration order.
        max_duration: Budget in seconds for the whole batch. Zero disables it.
    """

    checks: Mapping[CheckKind, tuple[CheckConfig, ...]]
    max_duration: float

    def iter_checks(self) -> Iterator[CheckConfig]:
        """Yield every check configuration in declaration order."""
        for configs in self.checks.values():
            yield from configs


@dataclass(frozen=True)
class Config:
    """Validated root configuration."""

    min_version: str
    modes: Mapping[ModeName, Mode]
    ignore_patterns: tuple[str, ...]

    def mode(self, name: str) -> Mode:
        """Return one configured mode.

        Raises:
            PrevetConfigError: If the mode is not configured.
        """
        configured = self.modes.get(name)  # type: ignore[call-overload]
        if configured is None:
            available = ", ".join(self.modes) or "none"
            raise PrevetConfigError(
                f"Mode '{name}' is not configured. Configured modes: {available}."
            )
        return configured
