from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from pyvfs.errors import TargetCollisionError
from pyvfs.logging import Reporter
from pyvfs.mapping import Mapping, TreeWalker, iter_regular_files, virtual_target


class _RecordingEncoder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, int]] = []

    def encode(self, target: str, source: Path, declared_size: int) -> str:
        self.calls.append((target, source.name, declared_size))
        return f"v{len(self.calls)}"


def _walker(encoder: _RecordingEncoder | None = None) -> tuple[TreeWalker, io.StringIO]:
    stream = io.StringIO()
    return TreeWalker(encoder=encoder, reporter=Reporter(stream=stream)), stream


def test_plain_file_maps_to_target_dir_and_base_name(tmp_path: Path) -> None:
    source = tmp_path / "testdata" / "hello.txt"
    source.parent.mkdir()
    source.write_bytes(b"hi")
    walker, _ = _walker()

    walker.walk_source("/docs", str(source))

    record = walker.registry.get("/docs/hello.txt")
    assert record is not None
    assert record.size == 2
    assert record.version == ""


def test_directory_is_walked_recursively_under_its_base_name(tmp_path: Path) -> None:
    (tmp_path / "assets" / "sub").mkdir(parents=True)
    (tmp_path / "assets" / "sub" / "file.txt").write_text("x", encoding="utf-8")
    walker, _ = _walker()

    walker.walk_source("/static", str(tmp_path / "assets"))

    assert [record.virtual_path for record in walker.registry.records()] == [
        "/static/assets/sub/file.txt"
    ]


def test_directory_entries_are_visited_in_lexical_order(tmp_path: Path) -> None:
    root = tmp_path / "tree"
    (root / "b").mkdir(parents=True)
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / "b" / "z.txt").write_text("z", encoding="utf-8")
    (root / "c.txt").write_text("c", encoding="utf-8")

    relative = [rel for _, rel, _ in iter_regular_files(root)]

    assert relative == ["a.txt", "b/z.txt", "c.txt"]


def test_root_target_dir_joins_without_double_slash() -> None:
    assert virtual_target("/", "hello.txt", ".") == "/hello.txt"
    assert virtual_target("/static", "assets", "sub/file.txt") == "/static/assets/sub/file.txt"


def test_colliding_targets_abort_even_for_identical_contents(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    (tmp_path / "a" / "x.txt").write_text("same", encoding="utf-8")
    (tmp_path / "b" / "x.txt").write_text("same", encoding="utf-8")
    encoder = _RecordingEncoder()
    walker, _ = _walker(encoder)
    mappings = [
        Mapping(source_paths=(str(tmp_path / "a" / "x.txt"),), target_dir="/out", original_spec="a"),
        Mapping(source_paths=(str(tmp_path / "b" / "x.txt"),), target_dir="/out", original_spec="b"),
    ]

    with pytest.raises(TargetCollisionError) as error:
        walker.walk_mappings(mappings)

    assert error.value.target == "/out/x.txt"
    assert len(encoder.calls) == 1


def test_encoder_receives_declared_size_and_version_is_recorded(tmp_path: Path) -> None:
    source = tmp_path / "data.bin"
    source.write_bytes(b"\x00\x01\x02")
    encoder = _RecordingEncoder()
    walker, stream = _walker(encoder)

    walker.walk_source("/bin", str(source))

    assert encoder.calls == [("/bin/data.bin", "data.bin", 3)]
    record = walker.registry.get("/bin/data.bin")
    assert record is not None
    assert record.version == "v1"
    assert stream.getvalue() == f"{source} -> /bin/data.bin\n"


def test_empty_mapping_is_reported_and_skipped() -> None:
    walker, stream = _walker()

    registry = walker.walk_mappings(
        [Mapping(source_paths=(), target_dir="/docs", original_spec="none/*::/docs")]
    )

    assert len(registry) == 0
    assert stream.getvalue() == "skip mapping, no matches: none/*::/docs\n"


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires named pipes")
def test_non_regular_source_is_skipped(tmp_path: Path) -> None:
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)
    walker, stream = _walker()

    walker.walk_source("/docs", str(fifo))

    assert len(walker.registry) == 0
    assert "skip source, not a regular file or directory" in stream.getvalue()


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="requires symlinks")
def test_symlinks_below_the_root_are_not_followed(tmp_path: Path) -> None:
    outside = tmp_path / "outside.txt"
    outside.write_text("outside", encoding="utf-8")
    root = tmp_path / "root"
    root.mkdir()
    (root / "inside.txt").write_text("inside", encoding="utf-8")
    (root / "link.txt").symlink_to(outside)

    relative = [rel for _, rel, _ in iter_regular_files(root)]

    assert relative == ["inside.txt"]
