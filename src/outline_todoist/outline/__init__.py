"""Codec between outline text lines and structured task records."""

from .common import (
    PRIORITY_HIGH,
    PRIORITY_MARKERS,
    PRIORITY_NONE,
    PRIORITY_URGENT,
    TaskRecord,
)
from .formatter import append_id, mark_completed, remove_id
from .parser import parse_content, parse_line

__all__ = [
    "PRIORITY_HIGH",
    "PRIORITY_MARKERS",
    "PRIORITY_NONE",
    "PRIORITY_URGENT",
    "TaskRecord",
    "append_id",
    "mark_completed",
    "parse_content",
    "parse_line",
    "remove_id",
]
