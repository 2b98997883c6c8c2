"""Pydantic models for the outline/Todoist sync passes.

Defines the data contracts shared by the pull and push passes and the
orchestrating engine:

- ``SyncFailure``: One task that could not be synced, and why.
- ``PullResult``: Outcome of the pull (completion) pass.
- ``PushResult``: Outcome of the push (create/update) pass.
- ``SyncResult``: Aggregate of a full pull-then-push run.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from pydantic import BaseModel


class SyncFailure(BaseModel):
    """A task whose sync raised.

    Attributes:
        title: Cleaned task title.
        message: Error message from the failing call.
        line_number: Zero-based line of the task in the pass's snapshot.
    """

    title: str
    message: str
    line_number: int

    model_config = {"frozen": True}


class PullResult(BaseModel):
    """Result of the pull pass.

    Attributes:
        content: Document text with remotely completed tasks ticked.
        completed: Number of lines marked completed.
        errors: Per-task failures, in line order.
    """

    content: str
    completed: int = 0
    errors: list[SyncFailure] = []

    model_config = {"frozen": True}


class PushResult(BaseModel):
    """Result of the push pass.

    Attributes:
        content: Document text with newly assigned ids stamped.
        created: Tasks created in Todoist (including 404 recreations).
        updated: Existing Todoist tasks updated.
        errors: Per-task failures, in processing order.
    """

    content: str
    created: int = 0
    updated: int = 0
    errors: list[SyncFailure] = []

    model_config = {"frozen": True}


class SyncResult(BaseModel):
    """Aggregate result of a full sync run.

    Attributes:
        content: Final document text (output of the push pass).
        created: Count from the push pass.
        updated: Count from the push pass.
        completed: Count from the pull pass.
        failed: Total number of failures across both passes.
        errors: Pull failures followed by push failures.
    """

    content: str
    created: int = 0
    updated: int = 0
    completed: int = 0
    failed: int = 0
    errors: list[SyncFailure] = []

    model_config = {"frozen": True}

    @property
    def has_changes(self) -> bool:
        """True if anything was created, updated, completed or failed."""
        return bool(
            self.created or self.updated or self.completed or self.failed
        )
