"""Typed models for mapping resolution and processed files."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Mapping:
    """One resolved PATTERN::TARGETDIR operand."""

    source_paths: tuple[str, ...]
    target_dir: str
    original_spec: str


@dataclass(slots=True, frozen=True)
class FileRecord:
    """Represents a file embedded under a virtual path."""

    virtual_path: str
    size: int
    version: str
    source_path: str
