"""Lifespan management for MCP server startup and shutdown."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from ..config import load_config_from_sources
from ..core.async_utils import run_sync
from ..core.client import TodoistClient

logger = logging.getLogger(__name__)


def _stderr_print(msg: str) -> None:
    """Print message to stderr for user feedback (safe in MCP mode)."""
    print(msg, file=sys.stderr, flush=True)


@asynccontextmanager
async def server_lifespan(
    config_overrides: dict[str, Any] | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """
    Manage server startup and shutdown lifecycle.

    On startup:
    - Resolve configuration: CLI > env vars (.env loaded first) > YAML > defaults
    - Create TodoistClient and validate the token by listing projects
    - Fail fast if Todoist is unreachable or the token is rejected

    Missing tag mappings are only warned about here; the sync tool
    reports them per call so the projects tool stays usable for setup.

    Args:
        config_overrides: Optional dict with CLI values (api_token, api_url, debug)

    Yields:
        Dict with 'client' key containing the initialized TodoistClient

    Raises:
        RuntimeError: If configuration is invalid or the connection fails.
    """
    logger.info("MCP server starting...")
    _stderr_print("Outline Todoist MCP Server starting...")

    try:
        config, _, sources = load_config_from_sources(config_overrides)
        source_desc = ", ".join(sources) if sources else "defaults"
        logger.info("Configuration loaded from: %s", source_desc)
        _stderr_print(f"  Configuration loaded from: {source_desc}")
        logger.info("Todoist API: %s", config.api_url)
        _stderr_print(f"  Todoist API: {config.api_url}")
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        _stderr_print("  Ensure TODOIST_API_TOKEN is set.")
        raise RuntimeError(
            f"Configuration error: {e}. Ensure TODOIST_API_TOKEN is set."
        ) from e

    if not config.tag_mappings:
        logger.warning("No tag mappings configured; sync will be refused")
        _stderr_print("  Warning: no tag mappings configured.")
    else:
        _stderr_print(f"  Tag mappings: {len(config.tag_mappings)}")

    logger.info("Validating Todoist connection...")
    _stderr_print("  Validating Todoist connection...")
    try:
        client = TodoistClient(config)
        count = await run_sync(client.validate_connection)
        logger.info("Connected to Todoist, %d projects visible", count)
        _stderr_print(f"  Connected to Todoist ({count} projects)")
        _stderr_print("Server ready. Waiting for MCP client connection...")
    except Exception as e:
        logger.error("Failed to connect to Todoist: %s", e)
        _stderr_print("ERROR: Todoist connection failed.")
        _stderr_print(f"  {e}")
        _stderr_print("  Check TODOIST_API_TOKEN and TODOIST_API_URL.")
        raise RuntimeError(
            f"Todoist connection failed: {e}. Check TODOIST_API_TOKEN and TODOIST_API_URL."
        ) from e

    yield {"client": client}

    logger.info("MCP server shutting down")
    _stderr_print("Outline Todoist MCP Server shutting down.")
