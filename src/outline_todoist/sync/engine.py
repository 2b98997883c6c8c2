"""Sync engine that runs the pull and push passes over one document.

The ``SyncEngine`` ties the passes together:

1. Pull: tick lines whose Todoist task was completed remotely.
2. Push: create/update the remaining open, mapped tasks, on the text the
   pull pass produced -- so anything just completed is re-parsed as
   completed and never pushed.
3. Aggregate both passes into one ``SyncResult``.

Error handling is per task inside each pass; a run only raises if the
document itself cannot be read or written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from outline_todoist.core.client import TodoistClient
from outline_todoist.file_handler import OutlineFile
from outline_todoist.sync.models import SyncResult
from outline_todoist.sync.pull import PullReconciler
from outline_todoist.sync.push import PushReconciler

if TYPE_CHECKING:
    from outline_todoist.config import Config

logger = logging.getLogger(__name__)


class SyncEngine:
    """Run pull then push and combine their results.

    Args:
        pull: The completion (pull) pass.
        push: The create/update (push) pass.
    """

    def __init__(self, pull: PullReconciler, push: PushReconciler) -> None:
        self.pull = pull
        self.push = push

    @classmethod
    def from_config(
        cls, config: Config, client: TodoistClient | None = None
    ) -> SyncEngine:
        """Build the pipeline from a runtime config.

        Args:
            config: Resolved configuration (token, mappings, retries).
            client: Pre-built client to share; one is created otherwise.
        """
        client = client or TodoistClient(config)
        return cls(
            PullReconciler(client),
            PushReconciler(client, config.tag_mappings),
        )

    # ------------------------------------------------------------------
    # Main entry points
    # ------------------------------------------------------------------

    def sync(self, content: str) -> SyncResult:
        """Sync one document's text.

        Args:
            content: Full outline text.

        Returns:
            A ``SyncResult`` whose ``content`` is the text to write back.
        """
        pulled = self.pull.pull(content)
        pushed = self.push.push(pulled.content)

        errors = [*pulled.errors, *pushed.errors]
        result = SyncResult(
            content=pushed.content,
            created=pushed.created,
            updated=pushed.updated,
            completed=pulled.completed,
            failed=len(errors),
            errors=errors,
        )
        logger.info(
            "Sync finished: %d created, %d updated, %d completed, %d failed",
            result.created,
            result.updated,
            result.completed,
            result.failed,
        )
        return result

    def sync_file(self, path: Path) -> SyncResult:
        """Read *path*, sync it, and write it back if anything changed.

        The file keeps the encoding it was read with.
        """
        document = OutlineFile(path)
        content = document.read()
        result = self.sync(content)
        if result.content != content:
            document.replace(result.content)
            logger.info("Wrote updated outline to %s", path)
        else:
            logger.debug("Outline %s unchanged", path)
        return result
