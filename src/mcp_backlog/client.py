"""Async client for the Backlog API v2.

One method per upstream capability the server uses.  Every call is a single
round-trip: no retry, no backoff, no caching.

Usage:
    async with BacklogClient(config) as client:
        projects = await client.get_recently_viewed_projects(RecentProjectsQuery(count=10))
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, cast
from urllib.parse import quote, urlencode

import httpx

from mcp_backlog.config import BacklogConfig
from mcp_backlog.errors import BacklogAPIError, BacklogConnectionError
from mcp_backlog.types.api import (
    BacklogErrorBody,
    BacklogErrorItem,
    Comment,
    CommentCount,
    Issue,
    Project,
    RecentlyViewedProject,
    Space,
    User,
    WikiPage,
    WikiPageDetail,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v2"

Order = Literal["asc", "desc"]

# ---------------------------------------------------------------------------
# Query values
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecentProjectsQuery:
    order: Order | None = None
    offset: int | None = None
    count: int | None = None

    def to_params(self) -> dict[str, Any]:
        return {"order": self.order, "offset": self.offset, "count": self.count}


@dataclass(frozen=True)
class IssueListQuery:
    offset: int | None = None
    count: int | None = None
    order: Order | None = None
    sort: str | None = None
    keyword: str | None = None
    status_ids: tuple[int, ...] = ()
    assignee_ids: tuple[int, ...] = ()
    issue_type_ids: tuple[int, ...] = ()
    priority_ids: tuple[int, ...] = ()

    def to_params(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "count": self.count,
            "order": self.order,
            "sort": self.sort,
            "keyword": self.keyword,
            "statusId": self.status_ids,
            "assigneeId": self.assignee_ids,
            "issueTypeId": self.issue_type_ids,
            "priorityId": self.priority_ids,
        }


@dataclass(frozen=True)
class CommentListQuery:
    min_id: int | None = None
    max_id: int | None = None
    count: int | None = None
    order: Order | None = None

    def to_params(self) -> dict[str, Any]:
        return {"minId": self.min_id, "maxId": self.max_id, "count": self.count, "order": self.order}


@dataclass(frozen=True)
class WikiListQuery:
    project_id_or_key: str | None = None
    keyword: str | None = None

    def to_params(self) -> dict[str, Any]:
        return {"projectIdOrKey": self.project_id_or_key, "keyword": self.keyword}


@dataclass(frozen=True)
class CommentCreate:
    content: str
    notified_user_ids: tuple[int, ...] = field(default=())

    def to_form(self) -> dict[str, Any]:
        return {"content": self.content, "notifiedUserId": self.notified_user_ids}


@dataclass(frozen=True)
class WikiUpdate:
    name: str | None = None
    content: str | None = None
    mail_notify: bool | None = None

    def to_form(self) -> dict[str, Any]:
        return {"name": self.name, "content": self.content, "mailNotify": self.mail_notify}


# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_params(params: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten *params* into ordered key/value pairs.

    ``None`` values are dropped.  Sequences expand into one ``key[]`` pair per
    element; Backlog ignores un-bracketed array filters.
    """
    return list(_iter_pairs(params))


def _iter_pairs(params: Mapping[str, Any]) -> Iterator[tuple[str, str]]:
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                yield f"{key}[]", _format_value(item)
        else:
            yield key, _format_value(value)


def _segment(value: str | int) -> str:
    return quote(str(value), safe="")


def _error_body(response: httpx.Response) -> BacklogErrorBody | None:
    """Return the decoded body when it has a non-empty ``errors`` list of objects."""
    try:
        body = response.json()
    except ValueError:
        return None
    errors = body.get("errors") if isinstance(body, dict) else None
    if not isinstance(errors, list) or not errors or not isinstance(errors[0], dict):
        return None
    return cast(BacklogErrorBody, body)


def parse_error_body(response: httpx.Response) -> tuple[str, int | None]:
    """Return ``(message, code)`` from a Backlog error body.

    Anything that is not ``{"errors": [{"message": ..., "code": ...}, ...]}``
    yields ``("Unknown error", None)``.
    """
    body = _error_body(response)
    if body is None:
        return "Unknown error", None
    first: BacklogErrorItem = body["errors"][0]
    message = first.get("message")
    code = first.get("code")
    return (
        message if isinstance(message, str) and message else "Unknown error",
        code if isinstance(code, int) and not isinstance(code, bool) else None,
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class BacklogClient:
    """Authenticated access to one Backlog space.

    Holds the credential and a pooled ``httpx.AsyncClient``; no other state.
    """

    def __init__(self, config: BacklogConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @property
    def space_url(self) -> str:
        return self._config.space_url

    async def __aenter__(self) -> BacklogClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- plumbing ------------------------------------------------------------

    def build_url(self, path: str) -> str:
        return f"{self._config.space_url}{API_PREFIX}{path}"

    def build_params(self, params: Mapping[str, Any] | None = None) -> list[tuple[str, str]]:
        """API key first, then caller parameters in insertion order."""
        return [("apiKey", self._config.api_key), *encode_params(params or {})]

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        form: Mapping[str, Any] | None = None,
    ) -> Any:
        url = self.build_url(path)
        query = self.build_params(params)
        try:
            if form is None:
                response = await self._http.request(method, url, params=query)
            else:
                response = await self._http.request(
                    method,
                    url,
                    params=query,
                    content=urlencode(encode_params(form)),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.RequestError as exc:
            msg = f"Could not reach Backlog at {self._config.space_url}: {exc}"
            raise BacklogConnectionError(msg) from exc

        if not response.is_success:
            message, code = parse_error_body(response)
            logger.debug("backlog %s %s -> %s %s", method, path, response.status_code, message)
            raise BacklogAPIError(message, error_code=code, status_code=response.status_code)
        return response.json()

    async def _get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def _post(self, path: str, form: Mapping[str, Any]) -> Any:
        return await self._request("POST", path, form=form)

    # -- account -------------------------------------------------------------

    async def get_myself(self) -> User:
        return cast(User, await self._get("/users/myself"))

    async def get_space(self) -> Space:
        return cast(Space, await self._get("/space"))

    # -- projects ------------------------------------------------------------

    async def get_recently_viewed_projects(self, query: RecentProjectsQuery | None = None) -> list[RecentlyViewedProject]:
        params = (query or RecentProjectsQuery()).to_params()
        return cast(list[RecentlyViewedProject], await self._get("/users/myself/recentlyViewedProjects", params))

    async def get_project(self, project_id_or_key: str | int) -> Project:
        return cast(Project, await self._get(f"/projects/{_segment(project_id_or_key)}"))

    async def get_project_issues(self, project_id_or_key: str | int, query: IssueListQuery | None = None) -> list[Issue]:
        params = (query or IssueListQuery()).to_params()
        return cast(list[Issue], await self._get(f"/projects/{_segment(project_id_or_key)}/issues", params))

    # -- issues and comments -------------------------------------------------

    async def get_issue(self, issue_id_or_key: str | int) -> Issue:
        return cast(Issue, await self._get(f"/issues/{_segment(issue_id_or_key)}"))

    async def get_issue_comments(self, issue_id_or_key: str | int, query: CommentListQuery | None = None) -> list[Comment]:
        params = (query or CommentListQuery()).to_params()
        return cast(list[Comment], await self._get(f"/issues/{_segment(issue_id_or_key)}/comments", params))

    async def get_issue_comment_count(self, issue_id_or_key: str | int) -> CommentCount:
        return cast(CommentCount, await self._get(f"/issues/{_segment(issue_id_or_key)}/comments/count"))

    async def get_issue_comment(self, issue_id_or_key: str | int, comment_id: int) -> Comment:
        path = f"/issues/{_segment(issue_id_or_key)}/comments/{_segment(comment_id)}"
        return cast(Comment, await self._get(path))

    async def add_issue_comment(self, issue_id_or_key: str | int, comment: CommentCreate) -> Comment:
        return cast(Comment, await self._post(f"/issues/{_segment(issue_id_or_key)}/comments", comment.to_form()))

    # -- wiki ----------------------------------------------------------------

    async def get_wiki_pages(self, query: WikiListQuery | None = None) -> list[WikiPage]:
        params = (query or WikiListQuery()).to_params()
        return cast(list[WikiPage], await self._get("/wikis", params))

    async def get_wiki_page(self, wiki_id: int | str) -> WikiPageDetail:
        return cast(WikiPageDetail, await self._get(f"/wikis/{_segment(wiki_id)}"))

    async def update_wiki_page(self, wiki_id: int | str, update: WikiUpdate) -> WikiPageDetail:
        return cast(WikiPageDetail, await self._post(f"/wikis/{_segment(wiki_id)}", update.to_form()))
