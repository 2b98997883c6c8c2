"""MCP tool handler for syncing one outline file.

Defines one tool:

- ``outline_sync`` -- pull completions from Todoist, push open mapped
  tasks, and write the file back.
"""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types

from ...config import require_sync_ready
from ...core.async_utils import run_sync
from ...core.client import TodoistClient
from ...file_handler import validate_file_path
from ...sync.engine import SyncEngine
from ...sync.reporter import format_sync_notice, result_to_json
from .registry import ToolSpec

logger = logging.getLogger(__name__)


OUTLINE_SYNC_TOOL = types.Tool(
    name="outline_sync",
    description=(
        "Synchronize the Markdown task list in a file with Todoist: tasks "
        "completed in Todoist are ticked locally, then open tasks whose tag "
        "matches a configured mapping are created or updated in Todoist. "
        "New Todoist ids are written back into the file."
    ),
    annotations=types.ToolAnnotations(
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Absolute path to the Markdown file",
            },
        },
        "required": ["path"],
    },
)


async def _handle_outline_sync(
    client: TodoistClient, args: dict[str, Any]
) -> types.CallToolResult:
    """Handle the ``outline_sync`` tool."""
    path_str = args.get("path")
    if not path_str:
        raise ValueError("path is required")

    path = validate_file_path(path_str)
    require_sync_ready(client.config)

    engine = SyncEngine.from_config(client.config, client=client)
    result = await run_sync(engine.sync_file, path)

    structured = result_to_json(result)
    structured["path"] = str(path)

    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=format_sync_notice(result))
        ],
        structuredContent=structured,
    )


SYNC_SPECS: list[ToolSpec] = [
    ToolSpec(tool=OUTLINE_SYNC_TOOL, handler=_handle_outline_sync),
]
