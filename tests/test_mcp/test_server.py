"""Tests for outline_todoist.mcp.server -- ping, dispatch and CLI args."""

from unittest.mock import MagicMock, patch

import pytest

from outline_todoist.mcp import server
from outline_todoist.mcp.server import (
    PING_SPEC,
    build_parser,
    get_client,
    get_registry,
    handle_call_tool,
    handle_list_tools,
    overrides_from_args,
    set_client,
    set_registry,
)
from outline_todoist.mcp.tools import ALL_SPECS, ToolRegistry


@pytest.fixture
def installed(mock_todoist_client):
    set_client(mock_todoist_client)
    set_registry(ToolRegistry([PING_SPEC] + ALL_SPECS))
    yield mock_todoist_client
    set_client(None)
    set_registry(None)


class TestAccessors:
    def test_client_not_initialized(self):
        set_client(None)
        with pytest.raises(RuntimeError, match="not initialized"):
            get_client()

    def test_registry_not_initialized(self):
        set_registry(None)
        with pytest.raises(RuntimeError, match="not initialized"):
            get_registry()

    def test_round_trip(self):
        client = MagicMock()
        set_client(client)
        try:
            assert get_client() is client
        finally:
            set_client(None)


class TestHandlers:
    async def test_list_tools(self, installed):
        names = [t.name for t in await handle_list_tools()]
        assert names == ["ping", "todoist_projects", "outline_sync"]

    async def test_ping_success(self, installed):
        installed.validate_connection.return_value = 3

        result = await handle_call_tool("ping", {})

        assert not result.isError
        assert "3 projects visible" in result.content[0].text

    async def test_ping_failure(self, installed):
        installed.validate_connection.side_effect = Exception("Request failed: 401")

        result = await handle_call_tool("ping", None)

        assert result.isError
        assert "Todoist connection failed" in result.content[0].text

    async def test_unknown_tool(self, installed):
        result = await handle_call_tool("nope", {})
        assert result.isError
        assert result.content[0].text.startswith("Error (unknown_tool):")


class TestArgs:
    def test_overrides(self):
        args = build_parser().parse_args(
            ["--token", "t", "--api-url", "https://x", "--debug"]
        )
        assert overrides_from_args(args) == {
            "api_token": "t",
            "api_url": "https://x",
            "debug": True,
            "log_file": "/tmp/outline-todoist.log",
        }

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert overrides_from_args(args) == {
            "log_file": "/tmp/outline-todoist.log"
        }


async def test_main_installs_and_clears_globals(mock_todoist_client):
    seen = {}

    class _Lifespan:
        async def __aenter__(self):
            return {"client": mock_todoist_client}

        async def __aexit__(self, *exc):
            return False

    class _Stdio:
        async def __aenter__(self):
            return (MagicMock(), MagicMock())

        async def __aexit__(self, *exc):
            return False

    async def _run(read_stream, write_stream, init_options):
        seen["client"] = get_client()
        seen["tools"] = get_registry().tool_count()
        seen["name"] = init_options.server_name

    with (
        patch.object(server, "setup_logging") as mock_logging,
        patch.object(server, "server_lifespan", return_value=_Lifespan()) as mock_lifespan,
        patch.object(server.mcp.server.stdio, "stdio_server", return_value=_Stdio()),
        patch.object(server.server, "run", side_effect=_run),
    ):
        await server.main({"log_file": "/tmp/x.log", "debug": True})

    assert seen == {
        "client": mock_todoist_client,
        "tools": 3,
        "name": "outline-todoist-mcp",
    }
    mock_logging.assert_called_once_with(
        mode="mcp", debug=True, log_file="/tmp/x.log"
    )
    mock_lifespan.assert_called_once_with(config_overrides={"debug": True})
    with pytest.raises(RuntimeError):
        get_client()
