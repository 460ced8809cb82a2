"""External coverage reporting.

Reporting never influences a Coverage verdict. Every failure is logged
and turned into a ``False`` return value.
"""

from __future__ import annotations

import json
import os
from typing import Protocol, Sequence

import httpx

from checks.coverage_types import FileCoverage
from core.constants import (
    COVERALLS_SERVICE_NAME,
    COVERALLS_TIMEOUT_SECONDS,
    DEFAULT_COVERALLS_ENDPOINT,
)
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class CoverageReporter(Protocol):
    """Collaborator receiving merged coverage results."""

    def report(self, global_percentage: float, files: Sequence[FileCoverage]) -> bool: ...


class CoverallsReporter:
    """Upload merged coverage to a Coveralls-compatible jobs endpoint."""

    def __init__(
        self,
        repo_token: str | None,
        endpoint: str = DEFAULT_COVERALLS_ENDPOINT,
        client: httpx.Client | None = None,
    ) -> None:
        self._repo_token = repo_token
        self._endpoint = endpoint
        self._client = client

    def report(self, global_percentage: float, files: Sequence[FileCoverage]) -> bool:
        """Send one job payload and report whether the service accepted it."""
        payload = build_coveralls_payload(self._repo_token, global_percentage, files)
        try:
            response = self._post(payload)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as error:
            _LOGGER.warning("coverage_upload_failed", endpoint=self._endpoint, error=str(error))
            return False
        _LOGGER.info(
            "coverage_uploaded",
            endpoint=self._endpoint,
            global_percentage=round(global_percentage, 2),
            file_count=len(files),
        )
        return True

    def _post(self, payload: dict[str, object]) -> httpx.Response:
        form_file = {"json_file": ("coverage.json", json.dumps(payload), "application/json")}
        if self._client is not None:
            return self._client.post(self._endpoint, files=form_file)
        with httpx.Client(timeout=COVERALLS_TIMEOUT_SECONDS) as client:
            return client.post(self._endpoint, files=form_file)


def build_coveralls_payload(
    repo_token: str | None,
    global_percentage: float,
    files: Sequence[FileCoverage],
) -> dict[str, object]:
    """Build the job payload from merged percentage and per-file detail."""
    payload: dict[str, object] = {
        "service_name": os.getenv("CI_NAME", COVERALLS_SERVICE_NAME),
        "service_job_id": os.getenv("TRAVIS_JOB_ID") or os.getenv("CI_JOB_ID") or "",
        "covered_percent": round(global_percentage, 2),
        "source_files": [
            {
                "name": row.file_path,
                "covered_statements": row.covered_statements,
                "total_statements": row.total_statements,
                "covered_percent": round(row.percentage, 2),
            }
            for row in files
        ],
    }
    if repo_token:
        payload["repo_token"] = repo_token
    return payload
