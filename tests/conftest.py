"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_PREVET_ENV_VARS = (
    "PREVET_CONFIG",
    "PREVET_MAX_WORKERS",
    "PREVET_PROBE_TIMEOUT",
    "COVERALLS_REPO_TOKEN",
    "COVERALLS_ENDPOINT",
)


def pytest_sessionstart() -> None:
    """Make ``src`` packages and the ``tests`` helpers importable."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture(autouse=True)
def _isolated_prevet_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shell settings out of runtime config."""
    for name in _PREVET_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
