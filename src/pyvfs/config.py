"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pyvfs.encoding import DEFAULT_CHUNK_BYTES

CONFIG_FILE_NAME = "pyvfs.toml"
DEFAULT_MODULE_NAME = "vfs"
CHUNK_BYTES_CAP = 1024 * 1024


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Event log settings."""

    events_path: Path | None


@dataclass(slots=True, frozen=True)
class GeneratorConfig:
    """Fully merged generator configuration."""

    module_name: str
    output: Path | None
    test_file: str | None
    chunk_bytes: int
    logging: LoggingConfig

    @property
    def dry_run(self) -> bool:
        """Return True when no artifact will be written."""
        return self.output is None

    def settings_snapshot(self) -> dict[str, object]:
        """Return the flat settings recorded when a run starts."""
        return {
            "module_name": self.module_name,
            "output": self.output,
            "test_file": self.test_file,
            "chunk_bytes": self.chunk_bytes,
            "events_path": self.logging.events_path,
            "dry_run": self.dry_run,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    output: str | None = None
    module_name: str | None = None
    test_file: str | None = None
    chunk_bytes: int | None = None
    events_path: str | None = None


def default_config() -> GeneratorConfig:
    """Build the default configuration."""
    return GeneratorConfig(
        module_name=DEFAULT_MODULE_NAME,
        output=None,
        test_file=None,
        chunk_bytes=DEFAULT_CHUNK_BYTES,
        logging=LoggingConfig(events_path=None),
    )


def load_config_file(config_path: Path, required: bool = False) -> dict[str, object]:
    """Load pyvfs.toml; a missing file is an error only when required."""
    if not config_path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{config_path.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_string(value: object, name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Config field '{name}' must be a string.")
    stripped = value.strip()
    return stripped or None


def _module_name(value: str | None, default: str) -> str:
    if value is None:
        return default
    if not value.isidentifier():
        raise ValueError(f"Module name '{value}' is not a valid Python identifier.")
    return value


def merge_config(
    base: GeneratorConfig, payload: dict[str, object], overrides: CliOverrides
) -> GeneratorConfig:
    """Merge defaults, config file, then CLI overrides."""
    generator_payload = _get_table(payload, "generator")
    logging_payload = _get_table(payload, "logging")

    module_name = _module_name(
        _optional_string(generator_payload.get("package"), "generator.package"),
        base.module_name,
    )
    output_value = _optional_string(generator_payload.get("output"), "generator.output")
    test_file = _optional_string(generator_payload.get("test_file"), "generator.test_file")
    chunk_bytes = _optional_positive_int_with_cap(
        generator_payload.get("chunk_bytes"),
        "generator.chunk_bytes",
        base.chunk_bytes,
        CHUNK_BYTES_CAP,
    )
    events_value = _optional_string(logging_payload.get("events_path"), "logging.events_path")

    merged = GeneratorConfig(
        module_name=module_name,
        output=Path(output_value) if output_value is not None else base.output,
        test_file=test_file if test_file is not None else base.test_file,
        chunk_bytes=chunk_bytes,
        logging=LoggingConfig(
            events_path=(
                Path(events_value) if events_value is not None else base.logging.events_path
            ),
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: GeneratorConfig, overrides: CliOverrides) -> GeneratorConfig:
    """Apply command-line overrides at highest precedence.

    Blank string overrides fall back to the lower-precedence value, except for
    the module name, which falls back to the default.
    """
    module_name = config.module_name
    if overrides.module_name is not None:
        module_name = _module_name(overrides.module_name.strip() or None, DEFAULT_MODULE_NAME)
    output = config.output
    if overrides.output is not None and overrides.output.strip():
        output = Path(overrides.output.strip())
    test_file = config.test_file
    if overrides.test_file is not None and overrides.test_file.strip():
        test_file = overrides.test_file.strip()
    chunk_bytes = _optional_positive_int_with_cap(
        overrides.chunk_bytes,
        "overrides.chunk_bytes",
        config.chunk_bytes,
        CHUNK_BYTES_CAP,
    )
    events_path = config.logging.events_path
    if overrides.events_path is not None and overrides.events_path.strip():
        events_path = Path(overrides.events_path.strip())
    return GeneratorConfig(
        module_name=module_name,
        output=output,
        test_file=test_file,
        chunk_bytes=chunk_bytes,
        logging=LoggingConfig(events_path=events_path),
    )


def load_effective_config(
    config_path: Path | None = None, overrides: CliOverrides | None = None
) -> GeneratorConfig:
    """Load effective config using merge order defaults -> config file -> overrides.

    Without config_path, pyvfs.toml in the working directory is read if present.
    An explicit config_path must exist.
    """
    if config_path is None:
        payload = load_config_file(Path.cwd() / CONFIG_FILE_NAME)
    else:
        payload = load_config_file(config_path, required=True)
    return merge_config(default_config(), payload, overrides or CliOverrides())


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
