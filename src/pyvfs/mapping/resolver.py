"""Mapping operand parsing and glob expansion."""

from __future__ import annotations

import glob
import posixpath
from collections.abc import Callable, Sequence
from typing import Final

from pyvfs.errors import MappingError
from pyvfs.mapping.models import Mapping

MAPPING_MARKER: Final[str] = "::"


def clean_virtual_path(path: str) -> str:
    """Collapse redundant separators and dot segments in a slash path."""
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def split_mapping(operand: str) -> tuple[str, str]:
    """Split an operand at the last marker into (pattern, target_dir)."""
    index = operand.rfind(MAPPING_MARKER)
    if index == -1:
        raise MappingError(f"invalid mapping: {operand}")
    pattern = operand[:index].strip()
    target_dir = operand[index + len(MAPPING_MARKER) :].strip()
    if not pattern or not target_dir:
        raise MappingError(f"invalid mapping: {operand}")
    if "\\" in target_dir or not target_dir.startswith("/"):
        raise MappingError(f"invalid mapping: {operand}")
    return pattern, clean_virtual_path(target_dir)


def validate_glob_pattern(pattern: str) -> None:
    """Reject patterns with unterminated or empty character classes."""
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "\\":
            if index + 1 >= length:
                raise ValueError("trailing backslash")
            index += 2
            continue
        if char == "[":
            start = index + 1
            if start < length and pattern[start] in "!^":
                start += 1
            close = pattern.find("]", start)
            if close == -1:
                raise ValueError("unterminated character class")
            if close == start:
                raise ValueError("empty character class")
            index = close + 1
            continue
        index += 1


def expand_pattern(pattern: str) -> tuple[str, ...]:
    """Expand a glob pattern into sorted filesystem matches."""
    return tuple(sorted(glob.glob(pattern, include_hidden=True)))


def resolve_mappings(
    operands: Sequence[str],
    expand: Callable[[str], tuple[str, ...]] = expand_pattern,
) -> list[Mapping]:
    """Resolve operands into mappings, preserving operand order."""
    mappings: list[Mapping] = []
    for operand in operands:
        pattern, target_dir = split_mapping(operand)
        try:
            validate_glob_pattern(pattern)
        except ValueError as error:
            raise MappingError(f"invalid mapping: {operand} ({error})") from error
        mappings.append(
            Mapping(
                source_paths=expand(pattern),
                target_dir=target_dir,
                original_spec=operand,
            )
        )
    return mappings
