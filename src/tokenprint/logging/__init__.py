"""Structured logging utilities."""

from .events import JsonlRunLogger, RunEvent, sanitize_metadata, utc_timestamp

__all__ = ["JsonlRunLogger", "RunEvent", "sanitize_metadata", "utc_timestamp"]
