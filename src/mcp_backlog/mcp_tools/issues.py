"""MCP tools for issue detail and issue comments."""

from __future__ import annotations

from typing import Any

from mcp.types import TextContent, Tool

from mcp_backlog.client import BacklogClient, CommentCreate, CommentListQuery
from mcp_backlog.mcp_tools.common import (
    COUNT_SCHEMA,
    ID_LIST_SCHEMA,
    ORDER_SCHEMA,
    ToolHandler,
    _count,
    _id_list,
    _optional_int,
    _order,
    _parse_args,
    _render,
    _require_id,
    _require_str,
    _require_text,
)
from mcp_backlog.types.inputs import (
    AddIssueCommentArgs,
    GetIssueCommentCountArgs,
    GetIssueCommentDetailArgs,
    GetIssueCommentsArgs,
    GetIssueDetailArgs,
)

_ISSUE_ID_OR_KEY = {"type": "string", "description": "Issue ID or issue key (e.g. MYPROJ-42)"}


def register() -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Return (tool_definitions, handler_map) for issue and comment tools."""
    tools = [
        Tool(
            name="get_issue_detail",
            description="Get full details of an issue by ID or key",
            inputSchema={
                "type": "object",
                "properties": {"issueIdOrKey": _ISSUE_ID_OR_KEY},
                "required": ["issueIdOrKey"],
            },
        ),
        Tool(
            name="get_issue_comments",
            description="List comments on an issue, newest first by default",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueIdOrKey": _ISSUE_ID_OR_KEY,
                    "minId": {"type": "integer", "minimum": 0, "description": "Only comments with ID >= minId"},
                    "maxId": {"type": "integer", "minimum": 0, "description": "Only comments with ID <= maxId"},
                    "count": COUNT_SCHEMA,
                    "order": ORDER_SCHEMA,
                },
                "required": ["issueIdOrKey"],
            },
        ),
        Tool(
            name="add_issue_comment",
            description="Add a comment to an issue",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueIdOrKey": _ISSUE_ID_OR_KEY,
                    "content": {"type": "string", "description": "Comment text"},
                    "notifiedUserId": {**ID_LIST_SCHEMA, "description": "User IDs to notify"},
                },
                "required": ["issueIdOrKey", "content"],
            },
        ),
        Tool(
            name="get_issue_comment_count",
            description="Count the comments on an issue",
            inputSchema={
                "type": "object",
                "properties": {"issueIdOrKey": _ISSUE_ID_OR_KEY},
                "required": ["issueIdOrKey"],
            },
        ),
        Tool(
            name="get_issue_comment_detail",
            description="Get a single comment on an issue",
            inputSchema={
                "type": "object",
                "properties": {
                    "issueIdOrKey": _ISSUE_ID_OR_KEY,
                    "commentId": {"type": "integer", "description": "Comment ID"},
                },
                "required": ["issueIdOrKey", "commentId"],
            },
        ),
    ]
    handlers: dict[str, ToolHandler] = {
        "get_issue_detail": _handle_get_issue_detail,
        "get_issue_comments": _handle_get_issue_comments,
        "add_issue_comment": _handle_add_issue_comment,
        "get_issue_comment_count": _handle_get_issue_comment_count,
        "get_issue_comment_detail": _handle_get_issue_comment_detail,
    }
    return tools, handlers


async def _handle_get_issue_detail(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetIssueDetailArgs)
    issue_id_or_key = _require_str(args, "issueIdOrKey")
    return _render("Issue Detail", await client.get_issue(issue_id_or_key))


async def _handle_get_issue_comments(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetIssueCommentsArgs)
    issue_id_or_key = _require_str(args, "issueIdOrKey")
    query = CommentListQuery(
        min_id=_optional_int(args.get("minId")),
        max_id=_optional_int(args.get("maxId")),
        count=_count(args),
        order=_order(args),
    )
    comments = await client.get_issue_comments(issue_id_or_key, query)
    return _render(f"Comments on {issue_id_or_key}", comments)


async def _handle_add_issue_comment(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, AddIssueCommentArgs)
    issue_id_or_key = _require_str(args, "issueIdOrKey")
    comment = CommentCreate(
        content=_require_text(args, "content"),
        notified_user_ids=_id_list(args, "notifiedUserId"),
    )
    created = await client.add_issue_comment(issue_id_or_key, comment)
    return _render(f"Comment Added to {issue_id_or_key}", created)


async def _handle_get_issue_comment_count(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetIssueCommentCountArgs)
    issue_id_or_key = _require_str(args, "issueIdOrKey")
    return _render(f"Comment Count for {issue_id_or_key}", await client.get_issue_comment_count(issue_id_or_key))


async def _handle_get_issue_comment_detail(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetIssueCommentDetailArgs)
    issue_id_or_key = _require_str(args, "issueIdOrKey")
    comment_id = _require_id(args, "commentId")
    comment = await client.get_issue_comment(issue_id_or_key, comment_id)
    return _render(f"Comment {comment_id} on {issue_id_or_key}", comment)
