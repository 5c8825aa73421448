"""MCP tools for wiki pages.

List results carry no ``content``; use ``get_wiki_page_detail`` for the body.
"""

from __future__ import annotations

from typing import Any

from mcp.types import TextContent, Tool

from mcp_backlog.client import BacklogClient, WikiListQuery, WikiUpdate
from mcp_backlog.errors import ValidationError
from mcp_backlog.mcp_tools.common import (
    ToolHandler,
    _optional_bool,
    _optional_str,
    _parse_args,
    _render,
    _require_id,
    _require_str,
)
from mcp_backlog.types.inputs import GetWikiPageDetailArgs, GetWikiPagesArgs, UpdateWikiPageArgs

_WIKI_ID = {"type": "integer", "description": "Wiki page ID"}


def register() -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Return (tool_definitions, handler_map) for wiki tools."""
    tools = [
        Tool(
            name="get_wiki_pages",
            description="List wiki pages of a project (names and tags only, no page content)",
            inputSchema={
                "type": "object",
                "properties": {
                    "projectIdOrKey": {"type": "string", "description": "Project ID or project key"},
                    "keyword": {"type": "string", "description": "Filter pages by keyword"},
                },
                "required": ["projectIdOrKey"],
            },
        ),
        Tool(
            name="get_wiki_page_detail",
            description="Get a wiki page including its content",
            inputSchema={
                "type": "object",
                "properties": {"wikiId": _WIKI_ID},
                "required": ["wikiId"],
            },
        ),
        Tool(
            name="update_wiki_page",
            description="Rename a wiki page and/or replace its content. Omitted fields are left unchanged.",
            inputSchema={
                "type": "object",
                "properties": {
                    "wikiId": _WIKI_ID,
                    "name": {"type": "string", "description": "New page name"},
                    "content": {"type": "string", "description": "New page content"},
                    "mailNotify": {"type": "boolean", "description": "Notify watchers by mail"},
                },
                "required": ["wikiId"],
            },
        ),
    ]
    handlers: dict[str, ToolHandler] = {
        "get_wiki_pages": _handle_get_wiki_pages,
        "get_wiki_page_detail": _handle_get_wiki_page_detail,
        "update_wiki_page": _handle_update_wiki_page,
    }
    return tools, handlers


async def _handle_get_wiki_pages(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetWikiPagesArgs)
    project_id_or_key = _require_str(args, "projectIdOrKey")
    query = WikiListQuery(project_id_or_key=project_id_or_key, keyword=_optional_str(args, "keyword"))
    return _render(f"Wiki Pages in {project_id_or_key}", await client.get_wiki_pages(query))


async def _handle_get_wiki_page_detail(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetWikiPageDetailArgs)
    wiki_id = _require_id(args, "wikiId")
    return _render("Wiki Page Detail", await client.get_wiki_page(wiki_id))


async def _handle_update_wiki_page(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, UpdateWikiPageArgs)
    wiki_id = _require_id(args, "wikiId")
    update = WikiUpdate(
        name=_optional_str(args, "name"),
        content=_optional_str(args, "content"),
        mail_notify=_optional_bool(args, "mailNotify"),
    )
    if update.name is None and update.content is None:
        msg = "name or content is required"
        raise ValidationError(msg)
    return _render("Wiki Page Updated", await client.update_wiki_page(wiki_id, update))
