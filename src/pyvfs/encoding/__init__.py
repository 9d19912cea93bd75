"""Content encoding package."""

from .encoder import (
    ADLER32_SEED,
    DEFAULT_CHUNK_BYTES,
    ContentEncoder,
    EntryWriter,
    format_version,
)

__all__ = [
    "ADLER32_SEED",
    "DEFAULT_CHUNK_BYTES",
    "ContentEncoder",
    "EntryWriter",
    "format_version",
]
