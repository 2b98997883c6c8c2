"""MCP (stdio) surface for outline/Todoist sync."""
