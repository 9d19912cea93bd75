from __future__ import annotations

from pathlib import Path

import pytest

from pyvfs.mapping import resolve_mappings
from pyvfs.mapping.resolver import expand_pattern, validate_glob_pattern


def test_expand_pattern_returns_sorted_matches_including_hidden(tmp_path: Path) -> None:
    (tmp_path / "b.txt").write_text("b", encoding="utf-8")
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    (tmp_path / ".hidden.txt").write_text("h", encoding="utf-8")

    matches = expand_pattern(str(tmp_path / "*.txt"))

    assert [Path(match).name for match in matches] == [".hidden.txt", "a.txt", "b.txt"]


def test_pattern_without_matches_resolves_to_empty_mapping(tmp_path: Path) -> None:
    mappings = resolve_mappings([f"{tmp_path}/*.missing::/docs"])

    assert len(mappings) == 1
    assert mappings[0].source_paths == ()


@pytest.mark.parametrize("pattern", ["a[bc]d", "[!x]*", "x\\*", "plain/path.txt"])
def test_valid_glob_patterns_pass_validation(pattern: str) -> None:
    validate_glob_pattern(pattern)


@pytest.mark.parametrize("pattern", ["a[bc", "a[]", "trailing\\"])
def test_malformed_glob_patterns_are_rejected(pattern: str) -> None:
    with pytest.raises(ValueError):
        validate_glob_pattern(pattern)
