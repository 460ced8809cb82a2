"""Unit tests for Go cover profile parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from checks.coverage_profile import parse_cover_profile, read_module_path, require_module_path
from core.errors import PrevetCoverageError

_PROFILE = """mode: count
example.com/repo/pkg/file.go:12.34,15.2 3 1
example.com/repo/main.go:3.10,5.2 2 0
github.com/other/lib/x.go:1.1,2.2 4 9
"""


def test_parse_cover_profile_strips_module_prefix() -> None:
    """Blocks become repository-relative; foreign modules are dropped."""
    sample = parse_cover_profile(_PROFILE, "pkg", module_path="example.com/repo")

    assert [(block.file_path, block.directory) for block in sample.blocks] == [
        ("pkg/file.go", "pkg"),
        ("main.go", "."),
    ]
    assert sample.blocks[0].statements == 3 and sample.blocks[0].hits == 1


def test_parse_cover_profile_module_root_block_lands_in_root_directory() -> None:
    """A file at the module root belongs to the "." directory."""
    profile = "mode: set\nexample.com/repo/main.go:1.1,2.2 1 1\n"
    sample = parse_cover_profile(profile, ".", "example.com/repo")

    assert [block.directory for block in sample.blocks] == ["."]


def test_parse_cover_profile_empty_text_yields_empty_sample() -> None:
    """Packages without statements produce empty profiles."""
    assert parse_cover_profile("", "pkg", "example.com/repo").blocks == ()


def test_parse_cover_profile_rejects_malformed_lines() -> None:
    """Garbage should surface as a coverage error."""
    with pytest.raises(PrevetCoverageError, match="line 2"):
        parse_cover_profile("mode: set\nnot a block\n", "pkg", "example.com/repo")


def test_parse_cover_profile_requires_mode_header() -> None:
    """Profiles always start with the mode line."""
    with pytest.raises(PrevetCoverageError, match="mode"):
        parse_cover_profile("a/b.go:1.1,2.2 1 1\n", "pkg", "example.com/repo")


def test_read_module_path_from_go_mod(tmp_path: Path) -> None:
    """The module directive names the import prefix."""
    (tmp_path / "go.mod").write_text("module example.com/repo\n\ngo 1.22\n", encoding="utf-8")

    assert read_module_path(tmp_path) == "example.com/repo"
    assert read_module_path(tmp_path / "missing") is None


def test_require_module_path_rejects_repository_without_go_mod(tmp_path: Path) -> None:
    """Import paths cannot be mapped to directories without a module directive."""
    with pytest.raises(PrevetCoverageError, match="go.mod"):
        require_module_path(tmp_path)
