"""Chunked content encoding with Adler-32 versioning."""

from __future__ import annotations

import zlib
from pathlib import Path
from typing import Protocol

from pyvfs.errors import FileTooLargeError, SourceIOError
from pyvfs.runtime import MAX_SIZE

DEFAULT_CHUNK_BYTES = 4096
ADLER32_SEED = 1


class EntryWriter(Protocol):
    """Receives one entry's bytes in stream order."""

    def begin_entry(self, target: str) -> None: ...

    def write_bytes(self, chunk: bytes) -> None: ...

    def end_entry(self, version: str) -> None: ...


def format_version(checksum: int) -> str:
    """Render a 32-bit checksum as 8 lowercase hex digits."""
    return f"{checksum & 0xFFFFFFFF:08x}"


class ContentEncoder:
    """Streams source files into an entry writer while computing versions."""

    def __init__(
        self,
        writer: EntryWriter,
        chunk_bytes: int = DEFAULT_CHUNK_BYTES,
        max_size: int = MAX_SIZE,
    ) -> None:
        if chunk_bytes < 1:
            raise ValueError("chunk_bytes must be a positive integer.")
        self._writer = writer
        self._chunk_bytes = chunk_bytes
        self._max_size = max_size

    def encode(self, target: str, source: Path, declared_size: int) -> str:
        """Encode source under target and return its version."""
        if declared_size > self._max_size:
            raise FileTooLargeError(str(source), declared_size, self._max_size)
        try:
            handle = source.open("rb")
        except OSError as error:
            raise SourceIOError(f"could not open: {source}", str(source)) from error
        checksum = ADLER32_SEED
        with handle:
            self._writer.begin_entry(target)
            while True:
                try:
                    chunk = handle.read(self._chunk_bytes)
                except OSError as error:
                    raise SourceIOError(f"could not read: {source}", str(source)) from error
                if not chunk:
                    break
                checksum = zlib.adler32(chunk, checksum)
                self._writer.write_bytes(chunk)
        version = format_version(checksum)
        self._writer.end_entry(version)
        return version
