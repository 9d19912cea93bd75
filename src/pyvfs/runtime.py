"""Read-only virtual file runtime shared by every generated store module.

The store table is an immutable mapping from virtual path to ``Entry``,
built once at import time. ``open`` returns an independent ``File`` cursor
over the shared, never-copied entry contents.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Protocol, runtime_checkable

__all__ = [
    "MAX_SIZE",
    "SEEK_CUR",
    "SEEK_END",
    "SEEK_SET",
    "BoundedReader",
    "BoundedSeeker",
    "EndOfStreamError",
    "Entry",
    "File",
    "InvalidOffsetError",
    "InvalidWhenceError",
    "NotFoundError",
    "ReadSeeker",
    "VersionMismatchError",
    "VfsError",
    "exists",
    "open",
    "paths",
]

MAX_SIZE = 2**31 - 1  # ~1.99 GiB

SEEK_SET = os.SEEK_SET
SEEK_CUR = os.SEEK_CUR
SEEK_END = os.SEEK_END


class VfsError(Exception):
    """Base class for virtual file errors."""


class NotFoundError(VfsError, FileNotFoundError):
    """Raised when a virtual path is not present in the store."""


class VersionMismatchError(VfsError):
    """Raised when a pinned version differs from the stored version."""

    def __init__(self, path: str, requested: str, actual: str) -> None:
        super().__init__(f"version mismatch (requested: {requested}, actual: {actual}): {path}")
        self.path = path
        self.requested = requested
        self.actual = actual


class InvalidWhenceError(VfsError, ValueError):
    """Raised for a seek whence other than SEEK_SET, SEEK_CUR or SEEK_END."""


class InvalidOffsetError(VfsError, ValueError):
    """Raised when a seek target falls outside the file."""


class EndOfStreamError(VfsError, EOFError):
    """Raised by readinto once the cursor sits at the end of the file."""


@runtime_checkable
class BoundedReader(Protocol):
    """Reads up to len(buffer) bytes into buffer."""

    def readinto(self, buffer: bytearray | memoryview) -> int: ...


@runtime_checkable
class BoundedSeeker(Protocol):
    """Moves a cursor within fixed bounds."""

    def seek(self, offset: int, whence: int = SEEK_SET) -> int: ...


@runtime_checkable
class ReadSeeker(BoundedReader, BoundedSeeker, Protocol):
    """A readable, seekable byte source."""


@dataclass(slots=True, frozen=True)
class Entry:
    """Embedded file contents and their version."""

    contents: bytes
    version: str


class File:
    """An open virtual file: a private cursor over a shared entry."""

    __slots__ = ("_entry", "_path", "_offset")

    def __init__(self, entry: Entry, path: str) -> None:
        self._entry = entry
        self._path = path
        self._offset = 0

    def __repr__(self) -> str:
        return f"File(path={self._path!r}, offset={self._offset}, size={self.size})"

    @property
    def path(self) -> str:
        """Return the virtual path the file was opened with."""
        return self._path

    @property
    def version(self) -> str:
        """Return the Adler-32 derived content version."""
        return self._entry.version

    @property
    def size(self) -> int:
        """Return the number of bytes of the file contents."""
        return len(self._entry.contents)

    def tell(self) -> int:
        """Return the current cursor offset."""
        return self._offset

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Copy up to len(buffer) bytes into buffer and advance the cursor.

        Raises EndOfStreamError when no bytes are left, even for an empty
        buffer. An empty buffer with bytes remaining returns 0.
        """
        contents = self._entry.contents
        available = len(contents) - self._offset
        if available == 0:
            raise EndOfStreamError(f"end of stream: {self._path}")
        target = memoryview(buffer).cast("B")
        count = min(available, len(target))
        target[:count] = memoryview(contents)[self._offset : self._offset + count]
        self._offset += count
        return count

    def read(self, size: int | None = -1) -> bytes:
        """Read up to size bytes (all remaining when negative); b"" at end."""
        contents = self._entry.contents
        available = len(contents) - self._offset
        if size is None or size < 0 or size > available:
            size = available
        data = contents[self._offset : self._offset + size]
        self._offset += size
        return data

    def seek(self, offset: int, whence: int = SEEK_SET) -> int:
        """Move the cursor and return the new offset.

        SEEK_END positions the cursor at size - offset. A rejected seek
        leaves the cursor where it was.
        """
        size = len(self._entry.contents)
        if offset > MAX_SIZE:
            raise InvalidOffsetError(f"invalid target offset: {offset}")
        if whence == SEEK_SET:
            candidate = offset
        elif whence == SEEK_END:
            candidate = size - offset
        elif whence == SEEK_CUR:
            candidate = self._offset + offset
        else:
            raise InvalidWhenceError(f"invalid seek whence: {whence}")
        if candidate > MAX_SIZE or candidate < 0 or candidate > size:
            raise InvalidOffsetError(f"invalid target offset: {candidate}")
        self._offset = candidate
        return self._offset


def open(path: str, version: str = "") -> File:
    """Open an embedded file.

    A non-empty version must match the stored version; an empty version
    skips the check.
    """
    entry = _STORE.get(path)
    if entry is None:
        raise NotFoundError(f"file not found: {path}")
    if version and entry.version != version:
        raise VersionMismatchError(path=path, requested=version, actual=entry.version)
    return File(entry, path)


def exists(path: str) -> bool:
    """Return True when path is embedded."""
    return path in _STORE


def paths() -> tuple[str, ...]:
    """Return embedded virtual paths in generation order."""
    return tuple(_STORE.keys())


_STORE: Mapping[str, Entry] = MappingProxyType({})
