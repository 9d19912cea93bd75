"""Human-readable progress lines mirrored into the JSONL event log."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from .events import JsonlEventLog

if TYPE_CHECKING:
    from pyvfs.errors import GenerationError
    from pyvfs.mapping.models import FileRecord


class Reporter:
    """Reports generator progress to a text stream and an optional event log."""

    def __init__(self, stream: TextIO | None = None, event_log: JsonlEventLog | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._event_log = event_log

    def run_started(self, settings: dict[str, object]) -> None:
        """Log the effective configuration a run starts with."""
        self._log("run_started", settings)

    def file_embedded(self, record: FileRecord) -> None:
        """Report one embedded source file."""
        self._line(f"{record.source_path} -> {record.virtual_path}")
        self._log(
            "file_embedded",
            {
                "source": record.source_path,
                "target": record.virtual_path,
                "size": record.size,
                "version": record.version,
            },
        )

    def mapping_skipped(self, original_spec: str) -> None:
        """Report a mapping whose pattern matched nothing."""
        self._line(f"skip mapping, no matches: {original_spec}")
        self._log("mapping_skipped", {"mapping": original_spec})

    def source_skipped(self, source: str) -> None:
        """Report a matched entry that is neither a regular file nor a directory."""
        self._line(f"skip source, not a regular file or directory: {source}")
        self._log("source_skipped", {"source": source})

    def run_completed(self, file_count: int, output: str | None) -> None:
        """Log the end of a successful run."""
        self._log(
            "run_completed",
            {"file_count": file_count, "output": output, "dry_run": output is None},
        )

    def run_failed(self, error: GenerationError) -> None:
        """Log a fatal error that aborted the run."""
        self._log("run_failed", {"message": error.message}, ok=False, error_code=error.code)

    def _line(self, text: str) -> None:
        print(text, file=self._stream)

    def _log(
        self,
        event: str,
        metadata: dict[str, object],
        ok: bool = True,
        error_code: str | None = None,
    ) -> None:
        if self._event_log is not None:
            self._event_log.record(event, metadata, ok=ok, error_code=error_code)
