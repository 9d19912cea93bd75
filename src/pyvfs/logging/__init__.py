"""Structured logging utilities."""

from .events import GenerationEvent, JsonlEventLog, sanitize_metadata, utc_timestamp
from .reporter import Reporter

__all__ = ["GenerationEvent", "JsonlEventLog", "Reporter", "sanitize_metadata", "utc_timestamp"]
