"""MCP server for a Backlog space.

Exposes recently viewed projects, issues and wiki pages as resources, Backlog
operations as tools, and a few analysis prompts.  Speaks MCP over stdio.

Usage:
    BACKLOG_API_KEY=... BACKLOG_SPACE_URL=https://example.backlog.com mcp-backlog-server
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import GetPromptResult, Prompt, Resource, TextContent, Tool

from mcp_backlog import __version__
from mcp_backlog import prompts as prompt_catalog
from mcp_backlog import resources as resource_catalog
from mcp_backlog.client import BacklogClient
from mcp_backlog.config import BacklogConfig, load_config
from mcp_backlog.errors import ConfigurationError, UnknownToolError
from mcp_backlog.mcp_tools import account, issues, projects, wiki
from mcp_backlog.mcp_tools.common import ToolHandler

# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

server = Server("mcp-backlog", version=__version__)
client: BacklogClient | None = None
_logger: logging.Logger | None = None

_TOOL_MODULES = (account, projects, issues, wiki)


def _build_tool_registry() -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Collect every module's tools and handlers; fail on any mismatch."""
    tools: list[Tool] = []
    handlers: dict[str, ToolHandler] = {}
    for module in _TOOL_MODULES:
        module_tools, module_handlers = module.register()
        for tool in module_tools:
            if any(t.name == tool.name for t in tools):
                msg = f"Duplicate tool name: {tool.name}"
                raise RuntimeError(msg)
            tools.append(tool)
        handlers.update(module_handlers)
    declared = {t.name for t in tools}
    if declared != set(handlers):
        msg = (
            f"Tool registry mismatch: declared without handler {sorted(declared - set(handlers))}, "
            f"handler without declaration {sorted(set(handlers) - declared)}"
        )
        raise RuntimeError(msg)
    return tools, handlers


_TOOLS, _TOOL_HANDLERS = _build_tool_registry()


def _get_client() -> BacklogClient:
    if client is None:
        msg = "Backlog client not initialized"
        raise RuntimeError(msg)
    return client


def _log() -> logging.Logger:
    return _logger or logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@server.list_resources()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_resources() -> list[Resource]:
    return await resource_catalog.list_resources(_get_client())


@server.read_resource()  # type: ignore[untyped-decorator,no-untyped-call]
async def read_resource(uri: Any) -> Iterable[ReadResourceContents]:
    content = await resource_catalog.read_resource(_get_client(), uri)
    return [ReadResourceContents(content=content["text"], mime_type=content["mimeType"])]


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


@server.list_prompts()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_prompts() -> list[Prompt]:
    return prompt_catalog.list_prompts()


@server.get_prompt()  # type: ignore[untyped-decorator,no-untyped-call]
async def get_prompt(name: str, arguments: dict[str, str] | None = None) -> GetPromptResult:
    return await prompt_catalog.get_prompt(_get_client(), name)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_tools() -> list[Tool]:
    return list(_TOOLS)


# Argument checking happens in the handlers: out-of-range paging values fall
# back to defaults instead of being rejected by JSON Schema validation.
@server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    arguments = arguments or {}
    t0 = time.monotonic()
    try:
        handler = _TOOL_HANDLERS.get(name)
        if handler is None:
            msg = f"Unknown tool: {name}"
            raise UnknownToolError(msg)
        result = await handler(_get_client(), arguments)
    except Exception as exc:
        _log().error("tool_error", extra={"tool": name, "args_data": arguments, "error": str(exc)}, exc_info=True)
        raise
    else:
        duration_ms = round((time.monotonic() - t0) * 1000, 1)
        _log().info("tool_call", extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms})
        return result


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def _run(config: BacklogConfig) -> None:
    global client, _logger

    from mcp_backlog.logging import setup_logging

    _logger = setup_logging(config.log_file)
    _logger.info("mcp_server_start", extra={"tool": "server", "args_data": {"space": config.space_url}})

    async with BacklogClient(config) as backlog:
        client = backlog
        try:
            async with stdio_server() as (read_stream, write_stream):
                await server.run(read_stream, write_stream, server.create_initialization_options())
        finally:
            client = None


def main() -> None:
    import asyncio

    parser = argparse.ArgumentParser(description="Backlog MCP server (stdio)")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write JSON logs to this file")
    args = parser.parse_args()

    try:
        config = load_config()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if args.log_file is not None:
        config = dataclasses.replace(config, log_file=args.log_file)

    asyncio.run(_run(config))


if __name__ == "__main__":
    main()
