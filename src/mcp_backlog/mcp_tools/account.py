"""MCP tools for the authenticated user and the space."""

from __future__ import annotations

from typing import Any

from mcp.types import TextContent, Tool

from mcp_backlog.client import BacklogClient
from mcp_backlog.mcp_tools.common import ToolHandler, _render


def register() -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Return (tool_definitions, handler_map) for account tools."""
    tools = [
        Tool(
            name="get_myself",
            description="Get the Backlog user that owns the configured API key",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="get_space",
            description="Get information about the configured Backlog space",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]
    handlers: dict[str, ToolHandler] = {
        "get_myself": _handle_get_myself,
        "get_space": _handle_get_space,
    }
    return tools, handlers


async def _handle_get_myself(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    return _render("User Info", await client.get_myself())


async def _handle_get_space(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    return _render("Space Info", await client.get_space())
