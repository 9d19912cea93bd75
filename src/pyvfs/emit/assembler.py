"""Store module rendering: header, one entry per file, footer."""

from __future__ import annotations

import ast
from importlib import resources
from typing import Final, TextIO

BANNER: Final[str] = "# Code generated with pyvfs. DO NOT EDIT."
STORE_OPENING: Final[str] = "_STORE: Mapping[str, Entry] = MappingProxyType({"
FOOTER: Final[str] = "})\n"
BYTES_PER_LINE = 16


def runtime_source() -> str:
    """Return the runtime module source embedded into every artifact."""
    return resources.files("pyvfs").joinpath("runtime.py").read_text(encoding="utf-8")


def render_header(module_name: str, timestamp: str, source: str | None = None) -> str:
    """Render the banner, module docstring, runtime code and table opening."""
    text = runtime_source() if source is None else source
    lines = text.splitlines(keepends=True)
    module = ast.parse(text)
    if module.body and ast.get_docstring(module) is not None:
        end_lineno = module.body[0].end_lineno or 0
        lines = lines[end_lineno:]
    body = "".join(lines).lstrip("\n")
    head, marker, _ = body.partition(STORE_OPENING)
    if not marker:
        raise ValueError("Runtime source does not declare the store table.")
    docstring = (
        f'"""Module {module_name} provides an embedded virtual file system.\n'
        f"\n"
        f"Generated at {timestamp}.\n"
        f'"""\n'
    )
    return f"{BANNER}\n\n{docstring}\n{head}{STORE_OPENING}\n"


class StoreAssembler:
    """Sequential writer for the generated store module."""

    def __init__(self, sink: TextIO, module_name: str, timestamp: str) -> None:
        self._sink = sink
        self._module_name = module_name
        self._timestamp = timestamp
        self._pending: list[str] = []
        self._entry_count = 0

    @property
    def entry_count(self) -> int:
        """Return how many entries have been completed."""
        return self._entry_count

    def write_header(self) -> None:
        """Write everything up to and including the table opening."""
        self._sink.write(render_header(self._module_name, self._timestamp))

    def begin_entry(self, target: str) -> None:
        """Open the table entry for one virtual path."""
        self._pending = []
        self._sink.write(f"    {target!r}: Entry(\n        contents=bytes((\n")

    def write_bytes(self, chunk: bytes) -> None:
        """Append bytes to the open entry as decimal integers."""
        for byte in chunk:
            self._pending.append(str(byte))
            if len(self._pending) == BYTES_PER_LINE:
                self._flush_line()

    def end_entry(self, version: str) -> None:
        """Close the open entry with its version."""
        if self._pending:
            self._flush_line()
        self._sink.write(f"        )),\n        version={version!r},\n    ),\n")
        self._entry_count += 1

    def write_footer(self) -> None:
        """Close the table literal."""
        self._sink.write(FOOTER)

    def _flush_line(self) -> None:
        self._sink.write("            " + ", ".join(self._pending) + ",\n")
        self._pending = []
