"""Core constants used across Prevet modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

TOOL_VERSION = "0.4.6"
CONFIG_FILE_NAME = "prevet.yml"
REPORT_FILE_NAME = "prevet_report.json"
SUPPORTED_MODES = ("pre-commit", "pre-push", "continuous-integration", "lint")
DEFAULT_MODE = "pre-commit"
SUPPORTED_CHECK_KINDS = (
    "build",
    "gofmt",
    "test",
    "errcheck",
    "goimports",
    "golint",
    "govet",
    "coverage",
    "custom",
)
DEFAULT_IGNORE_PATTERNS = (".*", "_*", "*.pb.go")
DEFAULT_MAX_WORKERS = 4
DEFAULT_PROBE_TIMEOUT_SECONDS = 30.0
MIN_COVERAGE_PERCENT = 0.0
MAX_COVERAGE_PERCENT = 100.0
ROOT_DIRECTORY = "."
GO_SOURCE_SUFFIX = ".go"
GO_TEST_SUFFIX = "_test.go"
DEFAULT_COVERALLS_ENDPOINT = "https://coveralls.io/api/v1/jobs"
COVERALLS_SERVICE_NAME = "prevet"
COVERALLS_TIMEOUT_SECONDS = 30.0
