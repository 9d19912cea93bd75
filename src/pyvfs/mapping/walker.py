"""Deterministic source traversal and virtual path registration."""

from __future__ import annotations

import os
import stat
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from pyvfs.errors import SourceIOError, TargetCollisionError
from pyvfs.logging import Reporter
from pyvfs.mapping.models import FileRecord, Mapping
from pyvfs.mapping.resolver import clean_virtual_path


class SourceEncoder(Protocol):
    """Encodes one source file into the artifact and returns its version."""

    def encode(self, target: str, source: Path, declared_size: int) -> str: ...


@dataclass(slots=True)
class ProcessedRegistry:
    """Insertion-ordered registry of embedded files keyed by virtual path."""

    _records: dict[str, FileRecord] = field(default_factory=dict)

    def __contains__(self, virtual_path: object) -> bool:
        return virtual_path in self._records

    def __len__(self) -> int:
        return len(self._records)

    def get(self, virtual_path: str) -> FileRecord | None:
        """Return a record by virtual path."""
        return self._records.get(virtual_path)

    def register(self, record: FileRecord) -> None:
        """Register a record; a repeated virtual path is fatal."""
        if record.virtual_path in self._records:
            raise TargetCollisionError(record.virtual_path)
        self._records[record.virtual_path] = record

    def records(self) -> tuple[FileRecord, ...]:
        """Return records in registration order."""
        return tuple(self._records.values())


def iter_regular_files(root: Path) -> Iterator[tuple[Path, str, int]]:
    """Yield (path, relative posix path, size) for regular files under root.

    A root that is itself a file yields a single item with relative path ".".
    Directory entries are visited in lexical order and symlinks below the
    root are never followed.
    """
    try:
        root_stat = root.stat()
    except OSError as error:
        raise SourceIOError(f"could not visit: {root}", str(root)) from error
    if stat.S_ISREG(root_stat.st_mode):
        yield root, ".", root_stat.st_size
        return
    yield from _walk_directory(root, root)


def _walk_directory(root: Path, current: Path) -> Iterator[tuple[Path, str, int]]:
    try:
        with os.scandir(current) as entries:
            ordered_entries = sorted(entries, key=lambda item: item.name)
    except OSError as error:
        raise SourceIOError(f"could not visit: {current}", str(current)) from error
    for entry in ordered_entries:
        full_path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_directory(root, full_path)
            continue
        if not entry.is_file(follow_symlinks=False):
            continue
        try:
            size = entry.stat(follow_symlinks=False).st_size
        except OSError as error:
            raise SourceIOError(f"could not visit: {full_path}", str(full_path)) from error
        yield full_path, full_path.relative_to(root).as_posix(), size


def virtual_target(target_dir: str, base_name: str, relative_path: str) -> str:
    """Join target_dir, the walk root's base name and the relative path."""
    return clean_virtual_path("/".join((target_dir, base_name, relative_path)))


class TreeWalker:
    """Walks mapping sources and registers each embedded file exactly once."""

    def __init__(
        self,
        encoder: SourceEncoder | None,
        reporter: Reporter,
        registry: ProcessedRegistry | None = None,
    ) -> None:
        self._encoder = encoder
        self._reporter = reporter
        self._registry = registry if registry is not None else ProcessedRegistry()

    @property
    def registry(self) -> ProcessedRegistry:
        """Return the registry populated by this walker."""
        return self._registry

    def walk_mappings(self, mappings: Iterable[Mapping]) -> ProcessedRegistry:
        """Process every mapping in order."""
        for mapping in mappings:
            if not mapping.source_paths:
                self._reporter.mapping_skipped(mapping.original_spec)
                continue
            for source in mapping.source_paths:
                self.walk_source(mapping.target_dir, source)
        return self._registry

    def walk_source(self, target_dir: str, source: str) -> None:
        """Embed every regular file below one matched source entry."""
        source_path = Path(source)
        try:
            mode = source_path.stat().st_mode
        except OSError as error:
            raise SourceIOError(f"stat error: {source}", source) from error
        if not (stat.S_ISREG(mode) or stat.S_ISDIR(mode)):
            self._reporter.source_skipped(source)
            return
        base_name = source_path.name
        for full_path, relative_path, size in iter_regular_files(source_path):
            target = virtual_target(target_dir, base_name, relative_path)
            if target in self._registry:
                raise TargetCollisionError(target)
            version = ""
            if self._encoder is not None:
                version = self._encoder.encode(target, full_path, size)
            record = FileRecord(
                virtual_path=target,
                size=size,
                version=version,
                source_path=str(full_path),
            )
            self._registry.register(record)
            self._reporter.file_embedded(record)
