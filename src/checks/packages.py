"""Go package discovery honoring ignore patterns."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from core.constants import GO_SOURCE_SUFFIX, GO_TEST_SUFFIX, ROOT_DIRECTORY


@dataclass(frozen=True)
class GoPackage:
    """One directory holding Go sources.

    Attributes:
        directory: Repository-relative POSIX path, ``.`` for the root.
        has_tests: Whether the directory contains ``_test.go`` files.
    """

    directory: str
    has_tests: bool

    @property
    def target(self) -> str:
        """Package argument accepted by the go tool."""
        return ROOT_DIRECTORY if self.directory == ROOT_DIRECTORY else f"./{self.directory}"


def is_ignored(relative_path: str, ignore_patterns: Sequence[str]) -> bool:
    """Whether any path component matches an ignore pattern."""
    components = [part for part in relative_path.split("/") if part and part != ROOT_DIRECTORY]
    return any(
        fnmatch.fnmatchcase(component, pattern)
        for component in components
        for pattern in ignore_patterns
    )


def find_go_packages(repo_root: Path, ignore_patterns: Sequence[str]) -> tuple[GoPackage, ...]:
    """Walk the repository and list directories with Go sources, sorted."""
    packages: list[GoPackage] = []
    for current, dir_names, file_names in os.walk(repo_root):
        relative = Path(current).relative_to(repo_root).as_posix()
        dir_names[:] = sorted(
            name for name in dir_names if not is_ignored(name, ignore_patterns)
        )
        sources = [
            name
            for name in file_names
            if name.endswith(GO_SOURCE_SUFFIX) and not is_ignored(name, ignore_patterns)
        ]
        if sources:
            packages.append(
                GoPackage(
                    directory=relative,
                    has_tests=any(name.endswith(GO_TEST_SUFFIX) for name in sources),
                )
            )
    return tuple(sorted(packages, key=lambda package: package.directory))
