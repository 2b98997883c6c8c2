"""MCP tool handlers for outline/Todoist sync.

Each module exposes a list of ToolSpecs wrapping the core client and sync
engine with async handlers and structured error responses.
"""

from .errors import build_error_response, translate_todoist_error
from .projects import PROJECT_SPECS
from .registry import ToolRegistry, ToolSpec
from .sync import SYNC_SPECS

ALL_SPECS: list[ToolSpec] = PROJECT_SPECS + SYNC_SPECS

__all__ = [
    "ALL_SPECS",
    "PROJECT_SPECS",
    "SYNC_SPECS",
    "ToolRegistry",
    "ToolSpec",
    "build_error_response",
    "translate_todoist_error",
]
