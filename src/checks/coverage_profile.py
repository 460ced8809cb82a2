"""Go cover profile parsing.

Profiles written by ``go test -coverprofile`` start with a ``mode:`` line
followed by one line per block::

    example.com/repo/pkg/file.go:12.34,15.2 3 1

The import path is rewritten to a repository-relative POSIX path using
the module path declared in ``go.mod``.
"""

from __future__ import annotations

import re
from pathlib import Path

from checks.coverage_types import CoverageBlock, CoverageSample
from core.errors import PrevetCoverageError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)
_BLOCK_PATTERN = re.compile(
    r"^(?P<path>.+):(?P<start_line>\d+)\.(?P<start_col>\d+),"
    r"(?P<end_line>\d+)\.(?P<end_col>\d+) (?P<statements>\d+) (?P<hits>\d+)$"
)
_MODULE_PATTERN = re.compile(r"^module\s+(?P<module>\S+)\s*$", re.MULTILINE)


def parse_cover_profile(
    profile_text: str,
    test_package: str,
    module_path: str,
) -> CoverageSample:
    """Parse one cover profile into a coverage sample.

    Args:
        profile_text: Raw profile content.
        test_package: Repository-relative directory whose tests ran.
        module_path: Module import path to strip.

    Returns:
        Sample holding every block inside the repository.

    Raises:
        PrevetCoverageError: If the profile is malformed.
    """
    lines = [line.strip() for line in profile_text.splitlines() if line.strip()]
    if not lines:
        return CoverageSample(test_package=test_package, blocks=())
    if not lines[0].startswith("mode:"):
        raise PrevetCoverageError(
            f"Cover profile for '{test_package}' must start with a 'mode:' line."
        )
    blocks: list[CoverageBlock] = []
    skipped = 0
    for line_number, line in enumerate(lines[1:], start=2):
        match = _BLOCK_PATTERN.match(line)
        if match is None:
            raise PrevetCoverageError(
                f"Malformed cover profile line {line_number} for '{test_package}': {line}"
            )
        file_path = _relative_path(match.group("path"), module_path)
        if file_path is None:
            skipped += 1
            continue
        blocks.append(
            CoverageBlock(
                file_path=file_path,
                start_line=int(match.group("start_line")),
                start_column=int(match.group("start_col")),
                end_line=int(match.group("end_line")),
                end_column=int(match.group("end_col")),
                statements=int(match.group("statements")),
                hits=int(match.group("hits")),
            )
        )
    if skipped:
        _LOGGER.debug("coverage_blocks_outside_module", test_package=test_package, skipped=skipped)
    return CoverageSample(test_package=test_package, blocks=tuple(blocks))


def read_module_path(repo_root: Path) -> str | None:
    """Return the module path declared in ``go.mod``, if any."""
    go_mod = repo_root / "go.mod"
    if not go_mod.is_file():
        return None
    match = _MODULE_PATTERN.search(go_mod.read_text(encoding="utf-8"))
    return match.group("module") if match else None


def require_module_path(repo_root: Path) -> str:
    """Return the module path, failing when profile paths cannot be made relative.

    Raises:
        PrevetCoverageError: If the repository has no usable ``go.mod``.
    """
    module_path = read_module_path(repo_root)
    if module_path is None:
        raise PrevetCoverageError(
            f"No module directive found in {repo_root / 'go.mod'}. "
            "Coverage is attributed per directory, so the repository must be a Go module."
        )
    return module_path


def _relative_path(import_path: str, module_path: str) -> str | None:
    prefix = module_path.rstrip("/") + "/"
    if not import_path.startswith(prefix):
        return None
    return import_path[len(prefix):]
