"""MCP tool handler for listing Todoist projects."""

import logging

import mcp.types as types

from ...core.async_utils import run_sync
from ...core.client import TodoistClient
from .registry import ToolSpec

logger = logging.getLogger(__name__)


PROJECTS_TOOL = types.Tool(
    name="todoist_projects",
    description=(
        "List Todoist projects (id and name). Use the ids when configuring "
        "tag mappings, and to check that configured mappings still exist."
    ),
    annotations=types.ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
    inputSchema={
        "type": "object",
        "properties": {},
        "required": [],
    },
)


async def _handle_projects(
    client: TodoistClient, args: dict
) -> types.CallToolResult:
    collections = await run_sync(client.list_collections)
    mapped = {m.collection_id: m.tag for m in client.config.tag_mappings}

    lines = [f"Found {len(collections)} projects"]
    for c in collections:
        suffix = f"  (mapped from {mapped[c.id]})" if c.id in mapped else ""
        lines.append(f"  {c.id}  {c.name}{suffix}")

    return types.CallToolResult(
        content=[types.TextContent(type="text", text="\n".join(lines))],
        structuredContent={
            "projects": [
                {**c.model_dump(), "tag": mapped.get(c.id)}
                for c in collections
            ]
        },
    )


PROJECT_SPECS: list[ToolSpec] = [
    ToolSpec(tool=PROJECTS_TOOL, handler=_handle_projects),
]
