"""Runtime configuration model for Prevet.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_COVERALLS_ENDPOINT,
    DEFAULT_MAX_WORKERS,
    DEFAULT_PROBE_TIMEOUT_SECONDS,
)
from core.errors import PrevetConfigError


@dataclass(frozen=True)
class RuntimeConfig:
    """Validated runtime configuration.

    Attributes:
        config_path: Location of the persisted YAML check configuration.
        max_workers: Upper bound on checks running concurrently in one mode.
        probe_timeout_seconds: Time limit for one prerequisite help command.
        coveralls_repo_token: Optional token for coverage uploads.
        coveralls_endpoint: Coverage upload endpoint.
    """

    config_path: Path
    max_workers: int
    probe_timeout_seconds: float
    coveralls_repo_token: str | None
    coveralls_endpoint: str

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            PrevetConfigError: If environment values are invalid.
        """
        config_path_value = os.getenv("PREVET_CONFIG", CONFIG_FILE_NAME)
        max_workers = _parse_max_workers(os.getenv("PREVET_MAX_WORKERS", str(DEFAULT_MAX_WORKERS)))
        probe_timeout = _parse_probe_timeout(
            os.getenv("PREVET_PROBE_TIMEOUT", str(DEFAULT_PROBE_TIMEOUT_SECONDS))
        )
        return cls(
            config_path=Path(config_path_value).expanduser().resolve(),
            max_workers=max_workers,
            probe_timeout_seconds=probe_timeout,
            coveralls_repo_token=os.getenv("COVERALLS_REPO_TOKEN") or None,
            coveralls_endpoint=os.getenv("COVERALLS_ENDPOINT", DEFAULT_COVERALLS_ENDPOINT),
        )


def _parse_max_workers(raw_value: str) -> int:
    """Parse the worker limit environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive worker count.

    Raises:
        PrevetConfigError: If value is not a positive integer.
    """
    try:
        max_workers = int(raw_value)
    except ValueError as error:
        raise PrevetConfigError(
            "Invalid PREVET_MAX_WORKERS value: "
            f"expected integer, got '{raw_value}'. "
            "Set PREVET_MAX_WORKERS to a positive number."
        ) from error
    if max_workers < 1:
        raise PrevetConfigError(
            f"Invalid PREVET_MAX_WORKERS value {max_workers}: must be at least 1."
        )
    return max_workers


def _parse_probe_timeout(raw_value: str) -> float:
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise PrevetConfigError(
            "Invalid PREVET_PROBE_TIMEOUT value: "
            f"expected seconds, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise PrevetConfigError(
            f"Invalid PREVET_PROBE_TIMEOUT value {timeout}: must be greater than zero."
        )
    return timeout
