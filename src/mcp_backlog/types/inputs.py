# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDict contracts for MCP tool handler input arguments.

Each TypedDict mirrors the JSON Schema ``inputSchema`` on the corresponding
``mcp.types.Tool`` definition.  The ``TOOL_ARGS_MAP`` registry maps tool names
to their TypedDict class so the sync test can verify structural agreement.

The TypedDicts describe what a host *may* send.  Handlers still validate
every value: the schema is advertised to the host, not enforced for it.
"""

# NOTE: Do NOT add ``from __future__ import annotations`` to this module.
# It breaks TypedDict.__required_keys__ / __optional_keys__ introspection
# on Python <3.14, which the sync test in test_input_type_contracts.py
# depends on for verifying required/optional agreement with JSON Schema.

from typing import Literal, NotRequired, TypedDict

Order = Literal["asc", "desc"]

# ---------------------------------------------------------------------------
# projects.py handlers
# ---------------------------------------------------------------------------


class GetRecentProjectsArgs(TypedDict):
    order: NotRequired[Order]
    offset: NotRequired[int]
    count: NotRequired[int]


class GetProjectDetailArgs(TypedDict):
    projectIdOrKey: str


class GetProjectIssuesArgs(TypedDict):
    projectIdOrKey: str
    offset: NotRequired[int]
    count: NotRequired[int]
    order: NotRequired[Order]
    sort: NotRequired[str]
    keyword: NotRequired[str]
    statusId: NotRequired[list[int]]
    assigneeId: NotRequired[list[int]]
    issueTypeId: NotRequired[list[int]]
    priorityId: NotRequired[list[int]]


# ---------------------------------------------------------------------------
# issues.py handlers
# ---------------------------------------------------------------------------


class GetIssueDetailArgs(TypedDict):
    issueIdOrKey: str


class GetIssueCommentsArgs(TypedDict):
    issueIdOrKey: str
    minId: NotRequired[int]
    maxId: NotRequired[int]
    count: NotRequired[int]
    order: NotRequired[Order]


class AddIssueCommentArgs(TypedDict):
    issueIdOrKey: str
    content: str
    notifiedUserId: NotRequired[list[int]]


class GetIssueCommentCountArgs(TypedDict):
    issueIdOrKey: str


class GetIssueCommentDetailArgs(TypedDict):
    issueIdOrKey: str
    commentId: int


# ---------------------------------------------------------------------------
# wiki.py handlers
# ---------------------------------------------------------------------------


class GetWikiPagesArgs(TypedDict):
    projectIdOrKey: str
    keyword: NotRequired[str]


class GetWikiPageDetailArgs(TypedDict):
    wikiId: int


class UpdateWikiPageArgs(TypedDict):
    wikiId: int
    name: NotRequired[str]
    content: NotRequired[str]
    mailNotify: NotRequired[bool]


# Registry: tool_name -> TypedDict class.
# No-argument tools (empty inputSchema properties) are intentionally excluded.
TOOL_ARGS_MAP: dict[str, type] = {
    # projects.py
    "get_recent_projects": GetRecentProjectsArgs,
    "get_project_detail": GetProjectDetailArgs,
    "get_project_issues": GetProjectIssuesArgs,
    # issues.py
    "get_issue_detail": GetIssueDetailArgs,
    "get_issue_comments": GetIssueCommentsArgs,
    "add_issue_comment": AddIssueCommentArgs,
    "get_issue_comment_count": GetIssueCommentCountArgs,
    "get_issue_comment_detail": GetIssueCommentDetailArgs,
    # wiki.py
    "get_wiki_pages": GetWikiPagesArgs,
    "get_wiki_page_detail": GetWikiPageDetailArgs,
    "update_wiki_page": UpdateWikiPageArgs,
}
