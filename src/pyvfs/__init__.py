"""Embed files into a generated Python module as a read-only virtual file system."""

from .config import CliOverrides, GeneratorConfig, load_effective_config
from .errors import GenerationError
from .generator import GenerationResult, generate

__all__ = [
    "CliOverrides",
    "GenerationError",
    "GenerationResult",
    "GeneratorConfig",
    "generate",
    "load_effective_config",
]

__version__ = "0.1.0"
