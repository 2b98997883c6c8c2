"""Pydantic models for Todoist REST payloads.

Field names follow the outline side of the sync (``title``,
``collection_id``, ``completed``); aliases map them to the Todoist wire
names (``content``, ``project_id``, ``is_completed``). Only the fields the
sync actually uses are modelled -- unknown keys in responses are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


class Collection(BaseModel):
    """A Todoist project (the target of a tag mapping)."""

    id: str
    name: str

    model_config = {"frozen": True, "coerce_numbers_to_str": True}


class RemoteItem(BaseModel):
    """A task as Todoist returns it.

    Attributes:
        id: Todoist task id.
        title: Task content.
        collection_id: Owning project id.
        priority: Todoist priority (1-4).
        due_date: ``YYYY-MM-DD`` from the ``due`` object, if set.
        parent_id: Parent task id for sub-tasks.
        completed: Whether the task is closed.
    """

    id: str
    title: str = Field(default="", alias="content")
    collection_id: str | None = Field(default=None, alias="project_id")
    priority: int = 4
    due_date: str | None = None
    parent_id: str | None = None
    completed: bool = Field(default=False, alias="is_completed")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "coerce_numbers_to_str": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _flatten_due(cls, data: Any) -> Any:
        # Todoist nests the date: {"due": {"date": "2024-01-15", ...}}
        if isinstance(data, dict) and "due" in data:
            data = dict(data)
            due = data.pop("due")
            if isinstance(due, dict) and "due_date" not in data:
                data["due_date"] = due.get("date")
        return data


class ItemCreate(BaseModel):
    """Body for ``POST /tasks``."""

    title: str = Field(serialization_alias="content")
    collection_id: str = Field(serialization_alias="project_id")
    priority: int | None = None
    due_date: str | None = None
    parent_id: str | None = None

    model_config = {"frozen": True}

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ItemUpdate(BaseModel):
    """Body for ``POST /tasks/{id}``; unset fields are left untouched."""

    title: str | None = Field(default=None, serialization_alias="content")
    priority: int | None = None
    due_date: str | None = None

    model_config = {"frozen": True}

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
