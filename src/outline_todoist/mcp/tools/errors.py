"""Error response builders for MCP tool handlers.

Errors come back as structured results with a corrective action so an
agent can recover without human intervention.
"""

import mcp.types as types

from ...core.errors import (
    RetriesExhaustedError,
    TodoistError,
    TransportError,
    is_not_found,
)


def build_error_response(
    error_type: str, message: str, corrective_action: str
) -> types.CallToolResult:
    """Build a structured error response with corrective action.

    Args:
        error_type: Error category (not_found, auth_error, rate_limited,
            validation_error, server_error, unknown_tool)
        message: Human-readable error description
        corrective_action: Specific action the agent can take to resolve the error

    Returns:
        CallToolResult with isError=True
    """
    error_text = f"Error ({error_type}): {message}\n\nAction: {corrective_action}"

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error_text)],
        isError=True,
    )


def translate_todoist_error(error: TodoistError) -> types.CallToolResult:
    """Translate a Todoist client failure into a structured error response."""
    match error:
        case RetriesExhaustedError():
            return build_error_response(
                "rate_limited",
                str(error),
                "Todoist is rate limiting or unavailable. Wait a minute, then retry.",
            )
        case TransportError(status_code=401 | 403):
            return build_error_response(
                "auth_error",
                str(error),
                "Check TODOIST_API_TOKEN (Todoist Settings > Integrations > Developer).",
            )
        case _ if is_not_found(error):
            return build_error_response(
                "not_found",
                str(error),
                "Use todoist_projects to verify project ids in the tag mappings.",
            )
        case _:
            return build_error_response(
                "server_error",
                str(error),
                "Check Todoist status or retry later.",
            )
