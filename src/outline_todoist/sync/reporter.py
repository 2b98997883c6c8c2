"""Sync result formatting functions.

Provides human-readable and machine-readable output for sync runs:

- ``format_sync_notice`` -- short status message for the user.
- ``format_sync_report`` -- full multi-line report with every failure.
- ``result_to_json`` -- structured dict for MCP tool output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import SyncResult

# Failures shown in the short notice; the full list stays on the result.
NOTICE_MAX_ERRORS = 3

# ------------------------------------------------------------------
# Short notice
# ------------------------------------------------------------------


def format_sync_notice(
    result: SyncResult, max_errors: int = NOTICE_MAX_ERRORS
) -> str:
    """Format the short status message shown after a sync.

    Args:
        result: The completed sync result.
        max_errors: How many failures to preview.

    Returns:
        ``"No tasks to sync"`` when nothing happened, otherwise a header
        followed by bullet lines.
    """
    parts: list[str] = []

    if result.created > 0 or result.updated > 0:
        parts.append(f"{result.created} created, {result.updated} updated")
    if result.completed > 0:
        parts.append(f"{result.completed} marked complete")
    if result.failed > 0:
        parts.append(f"{result.failed} failed")

    if not parts:
        return "No tasks to sync"

    message = "Synced with Todoist\n• " + "\n• ".join(parts)

    if result.errors:
        details = "\n• ".join(
            f'"{e.title}" - {e.message}' for e in result.errors[:max_errors]
        )
        message += f"\n• Failed: {details}"

    return message


# ------------------------------------------------------------------
# Full report
# ------------------------------------------------------------------


def format_sync_report(result: SyncResult, source: str | None = None) -> str:
    """Format a complete sync report as human-readable text.

    Args:
        result: The completed sync result.
        source: Optional document name for the header.

    Returns:
        Multi-line formatted string.
    """
    header = "Sync report"
    if source:
        header += f" for '{source}'"

    lines = [
        header,
        f"  Created:   {result.created}",
        f"  Updated:   {result.updated}",
        f"  Completed: {result.completed}",
        f"  Failed:    {result.failed}",
    ]

    if result.errors:
        lines.append("")
        lines.append("Errors:")
        for e in result.errors:
            # 1-based for humans
            lines.append(f"  line {e.line_number + 1}: {e.title}: {e.message}")

    return "\n".join(lines)


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def result_to_json(result: SyncResult) -> dict[str, Any]:
    """Convert a ``SyncResult`` to a JSON-serialisable dict.

    The document text is left out; callers already have it on disk.
    """
    return {
        "created": result.created,
        "updated": result.updated,
        "completed": result.completed,
        "failed": result.failed,
        "errors": [e.model_dump() for e in result.errors],
    }
