# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDicts mirroring the Backlog API v2 payloads we consume.

Only the keys the server reads are listed; upstream payloads carry more and
are passed through untouched.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict

# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


class User(TypedDict):
    id: int
    userId: str
    name: str
    roleType: int
    mailAddress: NotRequired[str]


class Space(TypedDict):
    spaceKey: str
    name: str
    ownerId: int
    lang: str
    timezone: str


# ---------------------------------------------------------------------------
# Projects and issues
# ---------------------------------------------------------------------------


class Project(TypedDict):
    id: int
    projectKey: str
    name: str
    chartEnabled: NotRequired[bool]
    subtaskingEnabled: NotRequired[bool]
    useWiki: NotRequired[bool]
    textFormattingRule: NotRequired[str]
    archived: NotRequired[bool]
    displayOrder: NotRequired[int]


class RecentlyViewedProject(TypedDict):
    project: Project
    updated: str


class Issue(TypedDict):
    id: int
    projectId: int
    issueKey: str
    keyId: int
    summary: str
    description: NotRequired[str]
    status: NotRequired[dict[str, Any]]
    assignee: NotRequired[dict[str, Any] | None]
    created: NotRequired[str]
    updated: NotRequired[str]
    customFields: NotRequired[list[dict[str, Any]]]


class Comment(TypedDict):
    id: int
    content: str | None
    createdUser: NotRequired[User]
    created: NotRequired[str]
    updated: NotRequired[str]


class CommentCount(TypedDict):
    count: int


# ---------------------------------------------------------------------------
# Wiki
# ---------------------------------------------------------------------------


class WikiPage(TypedDict):
    """List-view shape: ``content`` is absent."""

    id: int
    projectId: int
    name: str
    tags: list[dict[str, Any]]


class WikiPageDetail(WikiPage):
    """Detail-view shape: ``content`` is present."""

    content: str


# ---------------------------------------------------------------------------
# Errors and protocol payloads
# ---------------------------------------------------------------------------


class BacklogErrorItem(TypedDict):
    message: str
    code: int
    moreInfo: NotRequired[str]


class BacklogErrorBody(TypedDict):
    errors: list[BacklogErrorItem]


class ResourceContent(TypedDict):
    """Single content block returned by ``read_resource``."""

    uri: str
    mimeType: str
    text: str


class ProjectsSummary(TypedDict):
    totalProjects: int
    projectNames: list[str]
    lastUpdated: list[str]
