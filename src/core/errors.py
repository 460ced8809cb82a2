"""Prevet exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class PrevetError(Exception):
    """Base exception for all Prevet failures."""


class PrevetConfigError(PrevetError):
    """Raised for invalid persisted or runtime configuration."""


class PrevetDependencyError(PrevetError):
    """Raised when an optional runtime dependency is missing."""


class PrevetPrerequisiteError(PrevetError):
    """Raised when a check prerequisite stays unavailable after remediation."""


class PrevetCheckError(PrevetError):
    """Raised when one check fails its contract."""


class PrevetCoverageError(PrevetError):
    """Raised for malformed coverage profiles or samples."""


class PrevetCancelledError(PrevetError):
    """Raised when a check is stopped because its mode ran out of time."""
