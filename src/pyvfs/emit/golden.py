"""Golden smoke-test module rendering for one embedded file."""

from __future__ import annotations

from pathlib import PurePath
from string import Template
from typing import Final

from pyvfs.mapping.models import FileRecord

from .assembler import BANNER

ARTIFACT_SUFFIX: Final[str] = ".py"
TEST_SUFFIX: Final[str] = "_test.py"

_TEST_TEMPLATE = Template(
    '''$banner

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path

ARTIFACT = Path(__file__).with_name($artifact_name)
TEST_FILE_PATH = $path
TEST_FILE_VERSION = $version
TEST_FILE_SIZE = $size


def _load_store():
    spec = importlib.util.spec_from_file_location($module_name, ARTIFACT)
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


store = _load_store()


def test_path() -> None:
    f = store.open(TEST_FILE_PATH, TEST_FILE_VERSION)
    assert f.path == TEST_FILE_PATH


def test_version() -> None:
    f = store.open(TEST_FILE_PATH, TEST_FILE_VERSION)
    assert f.version == TEST_FILE_VERSION


def test_size() -> None:
    f = store.open(TEST_FILE_PATH, TEST_FILE_VERSION)
    assert f.size == TEST_FILE_SIZE


def test_reader() -> None:
    f = store.open(TEST_FILE_PATH, TEST_FILE_VERSION)
    buf = bytearray(TEST_FILE_SIZE)
    assert f.readinto(buf) == TEST_FILE_SIZE


def test_seeker() -> None:
    f = store.open(TEST_FILE_PATH, TEST_FILE_VERSION)
    assert f.seek(0, store.SEEK_END) == TEST_FILE_SIZE
'''
)


def derive_test_path(output: str) -> str:
    """Replace the first ".py" anywhere in output with "_test.py"."""
    return output.replace(ARTIFACT_SUFFIX, TEST_SUFFIX, 1)


def render_golden_tests(module_name: str, artifact_path: str, record: FileRecord) -> str:
    """Render a pytest module asserting path, version, size, read and seek."""
    return _TEST_TEMPLATE.substitute(
        banner=BANNER,
        artifact_name=repr(PurePath(artifact_path).name),
        module_name=repr(module_name),
        path=repr(record.virtual_path),
        version=repr(record.version),
        size=record.size,
    )
