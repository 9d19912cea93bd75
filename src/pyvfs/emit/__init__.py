"""Artifact rendering package."""

from .assembler import BANNER, STORE_OPENING, StoreAssembler, render_header, runtime_source
from .golden import derive_test_path, render_golden_tests

__all__ = [
    "BANNER",
    "STORE_OPENING",
    "StoreAssembler",
    "derive_test_path",
    "render_golden_tests",
    "render_header",
    "runtime_source",
]
