"""MCP tools for projects and project issue listings."""

from __future__ import annotations

from typing import Any

from mcp.types import TextContent, Tool

from mcp_backlog.client import BacklogClient, IssueListQuery, RecentProjectsQuery
from mcp_backlog.mcp_tools.common import (
    COUNT_SCHEMA,
    ID_LIST_SCHEMA,
    OFFSET_SCHEMA,
    ORDER_SCHEMA,
    ToolHandler,
    _count,
    _id_list,
    _offset,
    _optional_str,
    _order,
    _parse_args,
    _render,
    _require_str,
)
from mcp_backlog.types.inputs import GetProjectDetailArgs, GetProjectIssuesArgs, GetRecentProjectsArgs

DEFAULT_ISSUE_SORT = "created"
ISSUE_SORT_FIELDS = (
    "issueType",
    "category",
    "version",
    "milestone",
    "summary",
    "status",
    "priority",
    "attachment",
    "sharedFile",
    "created",
    "createdUser",
    "updated",
    "updatedUser",
    "assignee",
    "startDate",
    "dueDate",
    "estimatedHours",
    "actualHours",
    "childIssue",
)


def register() -> tuple[list[Tool], dict[str, ToolHandler]]:
    """Return (tool_definitions, handler_map) for project tools."""
    tools = [
        Tool(
            name="get_recent_projects",
            description="List the projects the current user viewed most recently",
            inputSchema={
                "type": "object",
                "properties": {
                    "order": ORDER_SCHEMA,
                    "offset": OFFSET_SCHEMA,
                    "count": COUNT_SCHEMA,
                },
            },
        ),
        Tool(
            name="get_project_detail",
            description="Get details of a project by numeric ID or project key",
            inputSchema={
                "type": "object",
                "properties": {
                    "projectIdOrKey": {"type": "string", "description": "Project ID or project key (e.g. MYPROJ)"},
                },
                "required": ["projectIdOrKey"],
            },
        ),
        Tool(
            name="get_project_issues",
            description="List issues in a project. Array filters (statusId, assigneeId, ...) match any of the given IDs.",
            inputSchema={
                "type": "object",
                "properties": {
                    "projectIdOrKey": {"type": "string", "description": "Project ID or project key"},
                    "offset": OFFSET_SCHEMA,
                    "count": COUNT_SCHEMA,
                    "order": ORDER_SCHEMA,
                    "sort": {
                        "type": "string",
                        "enum": list(ISSUE_SORT_FIELDS),
                        "default": DEFAULT_ISSUE_SORT,
                        "description": "Field to sort by",
                    },
                    "keyword": {"type": "string", "description": "Free-text search in summary and description"},
                    "statusId": {**ID_LIST_SCHEMA, "description": "Status IDs to include"},
                    "assigneeId": {**ID_LIST_SCHEMA, "description": "Assignee user IDs to include"},
                    "issueTypeId": {**ID_LIST_SCHEMA, "description": "Issue type IDs to include"},
                    "priorityId": {**ID_LIST_SCHEMA, "description": "Priority IDs to include"},
                },
                "required": ["projectIdOrKey"],
            },
        ),
    ]
    handlers: dict[str, ToolHandler] = {
        "get_recent_projects": _handle_get_recent_projects,
        "get_project_detail": _handle_get_project_detail,
        "get_project_issues": _handle_get_project_issues,
    }
    return tools, handlers


async def _handle_get_recent_projects(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetRecentProjectsArgs)
    query = RecentProjectsQuery(order=_order(args), offset=_offset(args), count=_count(args))
    return _render("Recent Projects", await client.get_recently_viewed_projects(query))


async def _handle_get_project_detail(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetProjectDetailArgs)
    project_id_or_key = _require_str(args, "projectIdOrKey")
    return _render("Project Detail", await client.get_project(project_id_or_key))


async def _handle_get_project_issues(client: BacklogClient, arguments: dict[str, Any]) -> list[TextContent]:
    args = _parse_args(arguments, GetProjectIssuesArgs)
    project_id_or_key = _require_str(args, "projectIdOrKey")
    sort = args.get("sort")
    query = IssueListQuery(
        offset=_offset(args),
        count=_count(args),
        order=_order(args),
        sort=sort if sort in ISSUE_SORT_FIELDS else DEFAULT_ISSUE_SORT,
        keyword=_optional_str(args, "keyword"),
        status_ids=_id_list(args, "statusId"),
        assignee_ids=_id_list(args, "assigneeId"),
        issue_type_ids=_id_list(args, "issueTypeId"),
        priority_ids=_id_list(args, "priorityId"),
    )
    issues = await client.get_project_issues(project_id_or_key, query)
    return _render(f"Issues in {project_id_or_key}", issues)
