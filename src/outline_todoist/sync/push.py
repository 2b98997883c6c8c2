"""Push pass: send open outline tasks to Todoist.

Tasks are routed to a project by the first matching tag mapping; unmapped
tasks are skipped. Parents are processed before children so a sub-task
created in the same pass can point at the id its parent just received.

Per task:

- **Has an id** -- update title, priority and date. If Todoist reports the
  task gone, recreate it and stamp the new id.
- **No id** -- create it and stamp the new id on the line.

Error handling is per task: one failure never aborts the pass.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from outline_todoist.config_schema import TagMapping
from outline_todoist.core.client import TodoistClient
from outline_todoist.core.errors import is_not_found
from outline_todoist.core.models import ItemCreate, ItemUpdate, RemoteItem
from outline_todoist.outline import TaskRecord, append_id, parse_content
from outline_todoist.sync.hierarchy import (
    resolve_parent_lines,
    sort_by_hierarchy,
)
from outline_todoist.sync.mapper import TagMapper
from outline_todoist.sync.models import PushResult, SyncFailure

logger = logging.getLogger(__name__)


class PushReconciler:
    """Create and update Todoist tasks from the outline.

    Args:
        client: Todoist client.
        mappings: Ordered tag mappings deciding each task's project.
    """

    def __init__(
        self,
        client: TodoistClient,
        mappings: Iterable[TagMapping],
    ) -> None:
        self.client = client
        self.mapper = TagMapper(mappings)

    def push(self, content: str) -> PushResult:
        """Sync every open, mapped task to Todoist.

        Args:
            content: Full outline text (normally the pull pass output).

        Returns:
            A ``PushResult`` with ids stamped on newly created lines.
        """
        lines = content.split("\n")
        records = parse_content(content)
        parent_lines = resolve_parent_lines(records)
        by_line = {r.line_number: r for r in records}

        # line -> id known after this pass touched it; parents first, so a
        # child always sees an id its parent got earlier in the same pass
        assigned: dict[int, str] = {}

        created = 0
        updated = 0
        errors: list[SyncFailure] = []

        open_records = [r for r in records if not r.completed]
        for record in sort_by_hierarchy(open_records):
            collection_id = self.mapper.collection_for(record)
            if collection_id is None:
                logger.debug(
                    "Skipping line %d: no tag mapping for %s",
                    record.line_number,
                    record.tags,
                )
                continue

            parent_id = self._parent_id(
                record, parent_lines, by_line, assigned
            )

            try:
                if record.remote_id:
                    try:
                        self.client.update_item(
                            record.remote_id, _update_for(record)
                        )
                    except Exception as exc:
                        if not is_not_found(exc):
                            raise
                        logger.warning(
                            "Task %s (line %d) was deleted in Todoist; recreating",
                            record.remote_id,
                            record.line_number,
                        )
                        new_item = self._create(
                            record, collection_id, parent_id
                        )
                        lines[record.line_number] = append_id(
                            lines[record.line_number], new_item.id
                        )
                        assigned[record.line_number] = new_item.id
                        created += 1
                    else:
                        assigned[record.line_number] = record.remote_id
                        updated += 1
                else:
                    new_item = self._create(record, collection_id, parent_id)
                    lines[record.line_number] = append_id(
                        lines[record.line_number], new_item.id
                    )
                    assigned[record.line_number] = new_item.id
                    created += 1
            except Exception as exc:
                logger.error(
                    "Error pushing line %d (%s): %s",
                    record.line_number,
                    record.title,
                    exc,
                )
                errors.append(
                    SyncFailure(
                        title=record.title,
                        message=str(exc),
                        line_number=record.line_number,
                    )
                )

        return PushResult(
            content="\n".join(lines),
            created=created,
            updated=updated,
            errors=errors,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _create(
        self,
        record: TaskRecord,
        collection_id: str,
        parent_id: str | None,
    ) -> RemoteItem:
        return self.client.create_item(
            ItemCreate(
                title=record.title,
                collection_id=collection_id,
                priority=record.priority,
                due_date=record.outgoing_date,
                parent_id=parent_id,
            )
        )

    @staticmethod
    def _parent_id(
        record: TaskRecord,
        parent_lines: dict[int, int],
        by_line: dict[int, TaskRecord],
        assigned: dict[int, str],
    ) -> str | None:
        """Todoist id of *record*'s parent, if the parent has one yet."""
        parent_line = parent_lines.get(record.line_number)
        if parent_line is None:
            return None
        return assigned.get(parent_line) or by_line[parent_line].remote_id


def _update_for(record: TaskRecord) -> ItemUpdate:
    return ItemUpdate(
        title=record.title,
        priority=record.priority,
        due_date=record.outgoing_date,
    )
