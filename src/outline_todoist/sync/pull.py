"""Pull pass: bring Todoist completions back into the outline.

Only lines that carry a Todoist id and are still open locally are checked.
Each one is fetched on its own, in line order; a task completed in Todoist
gets its checkbox ticked, its id dropped and a completion stamp appended.
A task deleted in Todoist is left untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone

from outline_todoist.core.client import TodoistClient
from outline_todoist.outline import mark_completed, parse_content
from outline_todoist.sync.models import PullResult, SyncFailure

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class PullReconciler:
    """Refresh local completion state from Todoist.

    Args:
        client: Todoist client (only ``get_item`` is used).
        today: Returns the date used for completion stamps.
    """

    def __init__(
        self,
        client: TodoistClient,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self.client = client
        self.today = today

    def pull(self, content: str) -> PullResult:
        """Tick every line whose Todoist task has been completed.

        Args:
            content: Full outline text.

        Returns:
            A ``PullResult`` with the rewritten text, the number of lines
            completed and one failure per task whose fetch raised.
        """
        lines = content.split("\n")
        candidates = [
            r
            for r in parse_content(content)
            if r.remote_id and not r.completed
        ]
        stamp = self.today().isoformat()

        completed = 0
        errors: list[SyncFailure] = []

        for record in candidates:
            try:
                remote = self.client.get_item(record.remote_id)
            except Exception as exc:
                logger.error(
                    "Failed to fetch task %s (line %d): %s",
                    record.remote_id,
                    record.line_number,
                    exc,
                )
                errors.append(
                    SyncFailure(
                        title=record.title,
                        message=str(exc),
                        line_number=record.line_number,
                    )
                )
                continue

            if remote is None:
                logger.debug(
                    "Task %s (line %d) no longer exists in Todoist",
                    record.remote_id,
                    record.line_number,
                )
            elif remote.completed:
                lines[record.line_number] = mark_completed(
                    lines[record.line_number], stamp
                )
                completed += 1
                logger.info(
                    "Marked line %d completed (%s)",
                    record.line_number,
                    record.title,
                )

        return PullResult(
            content="\n".join(lines), completed=completed, errors=errors
        )
