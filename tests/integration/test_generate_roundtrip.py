from __future__ import annotations

import importlib.util
import io
import sys
import zlib
from pathlib import Path
from types import ModuleType

import pytest

from pyvfs import CliOverrides, generate
from pyvfs.config import default_config, merge_config
from pyvfs.logging import Reporter


def _load_module(path: Path, name: str) -> ModuleType:
    spec = importlib.util.spec_from_file_location(name, path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    spec.loader.exec_module(module)
    return module


def _config(tmp_path: Path, output: Path | None, module_name: str = "vfs", **extra: object):
    return merge_config(
        default_config(),
        {},
        CliOverrides(
            output=str(output) if output is not None else None,
            module_name=module_name,
            **extra,  # type: ignore[arg-type]
        ),
    )


@pytest.fixture()
def source_tree(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    (root / "testdata").mkdir(parents=True)
    (root / "testdata" / "hello.txt").write_bytes(b"hi")
    (root / "assets" / "sub").mkdir(parents=True)
    (root / "assets" / "sub" / "file.txt").write_text("nested\n", encoding="utf-8")
    (root / "assets" / "logo.bin").write_bytes(bytes(range(256)) * 3)
    return root


def test_generated_store_round_trips_every_file(tmp_path: Path, source_tree: Path) -> None:
    output = tmp_path / "gen" / "roundtrip_vfs.py"
    result = generate(
        [f"{source_tree}/testdata/hello.txt::/docs", f"{source_tree}/assets::/static"],
        _config(tmp_path, output, module_name="roundtrip_vfs"),
        reporter=Reporter(stream=io.StringIO()),
        timestamp="2026-01-01T00:00:00.000Z",
    )

    assert result.output == output
    assert result.test_output is None
    assert [record.virtual_path for record in result.records] == [
        "/docs/hello.txt",
        "/static/assets/logo.bin",
        "/static/assets/sub/file.txt",
    ]

    store = _load_module(output, "roundtrip_vfs")
    assert store.paths() == tuple(record.virtual_path for record in result.records)
    for record in result.records:
        source = Path(record.source_path)
        handle = store.open(record.virtual_path, record.version)
        assert handle.size == source.stat().st_size
        assert handle.read() == source.read_bytes()
        assert handle.version == f"{zlib.adler32(source.read_bytes()):08x}"


def test_hello_scenario_read_and_seek(tmp_path: Path, source_tree: Path) -> None:
    output = tmp_path / "hello_vfs.py"
    generate(
        [f"{source_tree}/testdata/hello.txt::/docs"],
        _config(tmp_path, output, module_name="hello_vfs"),
        reporter=Reporter(stream=io.StringIO()),
    )
    store = _load_module(output, "hello_vfs")

    handle = store.open("/docs/hello.txt", "")
    assert handle.size == 2
    assert handle.version == "013b00d2"
    assert handle.readinto(bytearray(2)) == 2
    with pytest.raises(store.EndOfStreamError):
        handle.readinto(bytearray(2))

    again = store.open("/docs/hello.txt", "013b00d2")
    assert again.seek(0, store.SEEK_END) == 2
    with pytest.raises(store.EndOfStreamError):
        again.readinto(bytearray(2))

    with pytest.raises(store.VersionMismatchError):
        store.open("/docs/hello.txt", "wrong")


def test_versions_are_deterministic_across_runs(tmp_path: Path, source_tree: Path) -> None:
    operands = [f"{source_tree}/assets::/static"]
    reporter = Reporter(stream=io.StringIO())

    first = generate(operands, _config(tmp_path, tmp_path / "a.py"), reporter=reporter)
    second = generate(operands, _config(tmp_path, tmp_path / "b.py"), reporter=reporter)

    assert [r.version for r in first.records] == [r.version for r in second.records]


def test_empty_run_still_produces_importable_store(tmp_path: Path) -> None:
    output = tmp_path / "nothing_vfs.py"
    stream = io.StringIO()

    result = generate(
        [f"{tmp_path}/nothing-here/*::/docs"],
        _config(tmp_path, output, module_name="nothing_vfs"),
        reporter=Reporter(stream=stream),
    )

    assert result.records == ()
    assert "skip mapping, no matches" in stream.getvalue()
    store = _load_module(output, "nothing_vfs")
    assert store.paths() == ()
    with pytest.raises(store.NotFoundError):
        store.open("/docs/anything")


def test_golden_test_file_is_written_next_to_artifact(tmp_path: Path, source_tree: Path) -> None:
    output = tmp_path / "seeded_vfs.py"

    result = generate(
        [f"{source_tree}/testdata/hello.txt::/docs"],
        _config(tmp_path, output, module_name="seeded_vfs", test_file="/docs/./hello.txt"),
        reporter=Reporter(stream=io.StringIO()),
    )

    assert result.test_output == tmp_path / "seeded_vfs_test.py"
    golden = _load_module(tmp_path / "seeded_vfs_test.py", "seeded_vfs_test")
    for name in ("test_path", "test_version", "test_size", "test_reader", "test_seeker"):
        getattr(golden, name)()
