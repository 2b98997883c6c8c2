"""Config-driven tag mapper for the push pass.

Translates a task's hashtags into the Todoist project that should receive
it, using the ordered ``TagMapping`` rules from the config:

1. **Ordered mappings** -- the first mapping whose tag the task carries
   wins, no matter where that tag appears in the line.
2. **No fallback** -- a task matching no mapping is left alone.
"""

from __future__ import annotations

from collections.abc import Iterable

from outline_todoist.config_schema import TagMapping
from outline_todoist.outline import TaskRecord


class TagMapper:
    """Resolve the target Todoist project for a task.

    Args:
        mappings: Ordered tag mappings; copied into an immutable tuple.
    """

    def __init__(self, mappings: Iterable[TagMapping]) -> None:
        self._mappings: tuple[TagMapping, ...] = tuple(mappings)

    @property
    def mappings(self) -> tuple[TagMapping, ...]:
        return self._mappings

    def collection_for(self, record: TaskRecord) -> str | None:
        """Return the project id for *record*, or ``None`` if unmapped."""
        mapping = self.mapping_for(record)
        return mapping.collection_id if mapping else None

    def mapping_for(self, record: TaskRecord) -> TagMapping | None:
        for mapping in self._mappings:
            if mapping.tag in record.tags:
                return mapping
        return None
