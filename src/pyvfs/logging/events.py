"""Generation events and the JSONL file they are written to."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class GenerationEvent:
    """One step of a generation run, as written to the event log."""

    timestamp: str
    run_id: str
    event: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object]

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_metadata(metadata: dict[str, object]) -> dict[str, object]:
    """Keep JSON scalars, stringify paths, and reduce containers to their shape."""
    sanitized: dict[str, object] = {}
    for key, value in sorted(metadata.items()):
        if value is None or isinstance(value, (str, int, float, bool)):
            sanitized[key] = value
        elif isinstance(value, Path):
            sanitized[key] = value.as_posix()
        elif isinstance(value, (list, tuple)):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
        elif isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(k) for k in value)
        else:
            sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlEventLog:
    """Event sink for one generation run.

    Every event carries the run id the log was created with. The parent
    directory is created up front so an unwritable location fails before
    any source is read.
    """

    def __init__(self, path: Path, run_id: str | None = None) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._path = path
        self._run_id = run_id or f"run-{utc_timestamp()}"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def run_id(self) -> str:
        return self._run_id

    def record(
        self,
        event: str,
        metadata: dict[str, object],
        ok: bool = True,
        error_code: str | None = None,
    ) -> GenerationEvent:
        """Write one event line and return the event as written."""
        entry = GenerationEvent(
            timestamp=utc_timestamp(),
            run_id=self._run_id,
            event=event,
            ok=ok,
            error_code=error_code,
            metadata=sanitize_metadata(metadata),
        )
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(entry.to_json() + "\n")
        return entry
