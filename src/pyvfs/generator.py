"""Generation pipeline orchestration: resolve, walk, encode, assemble."""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from pyvfs.config import GeneratorConfig
from pyvfs.emit import StoreAssembler, derive_test_path, render_golden_tests
from pyvfs.encoding import ContentEncoder
from pyvfs.errors import (
    MissingOperandError,
    SourceIOError,
    TestPathConflictError,
    UnknownTestFileError,
)
from pyvfs.logging import Reporter, utc_timestamp
from pyvfs.mapping import (
    FileRecord,
    ProcessedRegistry,
    TreeWalker,
    clean_virtual_path,
    resolve_mappings,
)


@dataclass(slots=True, frozen=True)
class GenerationResult:
    """Outcome of one generation run."""

    records: tuple[FileRecord, ...]
    output: Path | None
    test_output: Path | None

    @property
    def dry_run(self) -> bool:
        """Return True when nothing was written."""
        return self.output is None


def generate(
    operands: Sequence[str],
    config: GeneratorConfig,
    reporter: Reporter | None = None,
    timestamp: str | None = None,
) -> GenerationResult:
    """Run the whole pipeline once; any GenerationError aborts the run."""
    if not operands:
        raise MissingOperandError()
    active_reporter = reporter or Reporter()
    active_reporter.run_started(config.settings_snapshot())
    mappings = resolve_mappings(operands)

    if config.dry_run:
        registry = TreeWalker(encoder=None, reporter=active_reporter).walk_mappings(mappings)
        active_reporter.run_completed(len(registry), None)
        return GenerationResult(records=registry.records(), output=None, test_output=None)

    output = config.output
    test_output: Path | None = None
    if config.test_file is not None:
        test_output = Path(derive_test_path(str(output)))
        if test_output == output:
            raise TestPathConflictError(str(output))
    seed: FileRecord | None = None
    with _atomic_output(output) as sink:
        assembler = StoreAssembler(
            sink=sink,
            module_name=config.module_name,
            timestamp=timestamp or utc_timestamp(),
        )
        encoder = ContentEncoder(writer=assembler, chunk_bytes=config.chunk_bytes)
        assembler.write_header()
        registry = TreeWalker(encoder=encoder, reporter=active_reporter).walk_mappings(mappings)
        assembler.write_footer()
        if config.test_file is not None:
            seed = _test_seed(registry, config.test_file)

    if seed is not None and test_output is not None:
        with _atomic_output(test_output) as sink:
            sink.write(render_golden_tests(config.module_name, str(output), seed))

    active_reporter.run_completed(assembler.entry_count, str(output))
    return GenerationResult(records=registry.records(), output=output, test_output=test_output)


def _test_seed(registry: ProcessedRegistry, test_file: str) -> FileRecord:
    target = clean_virtual_path(test_file)
    record = registry.get(target)
    if record is None:
        raise UnknownTestFileError(target)
    return record


@contextmanager
def _atomic_output(path: Path) -> Iterator[TextIO]:
    """Write to a sibling temp file and move it over path on success."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise SourceIOError(f"could not create: {path.parent}", str(path.parent)) from error
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        handle = tmp_path.open("w", encoding="utf-8", newline="\n")
    except OSError as error:
        raise SourceIOError(f"could not create: {path}", str(path)) from error
    try:
        with handle:
            yield handle
        os.replace(tmp_path, path)
    except OSError as error:
        tmp_path.unlink(missing_ok=True)
        raise SourceIOError(f"could not write: {path}", str(path)) from error
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
