"""Mapping resolution and source traversal package."""

from .models import FileRecord, Mapping
from .resolver import clean_virtual_path, resolve_mappings, split_mapping
from .walker import ProcessedRegistry, TreeWalker, iter_regular_files, virtual_target

__all__ = [
    "FileRecord",
    "Mapping",
    "ProcessedRegistry",
    "TreeWalker",
    "clean_virtual_path",
    "iter_regular_files",
    "resolve_mappings",
    "split_mapping",
    "virtual_target",
]
