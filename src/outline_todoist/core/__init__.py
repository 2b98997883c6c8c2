"""Todoist transport shared between the CLI and the MCP server."""

from .async_utils import run_sync
from .client import TodoistClient
from .errors import (
    NotFoundError,
    RetriesExhaustedError,
    TodoistError,
    TransportError,
)
from .retry import RetryPolicy

__all__ = [
    "NotFoundError",
    "RetriesExhaustedError",
    "RetryPolicy",
    "TodoistClient",
    "TodoistError",
    "TransportError",
    "run_sync",
]
