"""Unified configuration schema for outline_todoist.

Defines Pydantic models for the YAML config structure with dedicated
sections for the Todoist connection, the ordered tag mappings and logging.
The runtime ``Config`` dataclass is resolved from these in ``config.py``.

Usage:
    from outline_todoist.config_schema import (
        UnifiedConfig, build_config,
    )

    raw = load_hierarchical_config()
    unified = build_config(raw)
    mappings = unified.mappings
"""

from __future__ import annotations

import logging

from pydantic import AliasChoices, BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class TodoistConfig(BaseModel):
    """Todoist connection settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    api_token: str | None = Field(
        default=None, description="Todoist API token"
    )
    api_url: str | None = Field(
        default=None, description="REST API base URL"
    )
    debug: bool = Field(default=False, description="Enable debug mode")
    timeout: float = Field(
        default=30.0, gt=0, description="Per-request timeout in seconds"
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per retried request, first one included (1-10)",
    )
    retry_base_delay: float = Field(
        default=1.0,
        ge=0,
        description="Seconds before the first retry; doubles each retry",
    )

    model_config = {"frozen": True}


class TagMapping(BaseModel):
    """Route tasks carrying ``tag`` to a Todoist project.

    Order matters: the first mapping whose tag a task carries decides the
    project. Accepts the YAML keys ``project_id`` / ``project_name`` as
    well as the field names.

    Attributes:
        tag: Hashtag, normalised to start with ``#``.
        collection_id: Target Todoist project id.
        display_name: Project name, kept for display only.
    """

    tag: str
    collection_id: str = Field(
        validation_alias=AliasChoices("collection_id", "project_id")
    )
    display_name: str = Field(
        default="",
        validation_alias=AliasChoices("display_name", "project_name"),
    )

    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    @field_validator("tag")
    @classmethod
    def _prefix_hash(cls, value: str) -> str:
        value = value.strip()
        if not value or value == "#":
            raise ValueError("tag cannot be empty")
        return value if value.startswith("#") else f"#{value}"


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    todoist: TodoistConfig = Field(default_factory=TodoistConfig)
    mappings: list[TagMapping] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully -- anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)

