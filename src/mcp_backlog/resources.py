"""Resource catalog: recently viewed projects plus a best-effort preview.

``list_resources`` returns every recently viewed project, then (best effort)
issues and wiki pages of the first project.  ``read_resource`` resolves a
``backlog://`` URI back to upstream data.

Both fallback chains are ordered lists of independent steps.  A step either
yields data or ``None``; the chain stops on the first ``None`` (listing) or
the first hit (lookup).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from mcp.types import Resource

from mcp_backlog.client import BacklogClient, IssueListQuery, RecentProjectsQuery, WikiListQuery
from mcp_backlog.errors import BacklogError, NotFoundError
from mcp_backlog.types.api import Project, ResourceContent
from mcp_backlog.uri import ResourceKind, ResourceURI, issue_uri, project_uri, wiki_uri

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"

LIST_PROJECT_COUNT = 20
PREVIEW_ISSUE_COUNT = 10
PREVIEW_WIKI_COUNT = 10
PROJECT_SCAN_COUNT = 100


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StepOutcome:
    """Result of one best-effort listing step."""

    entries: list[Resource] = field(default_factory=list)
    ok: bool = True


ListingStep = Callable[[BacklogClient, Project], Awaitable[StepOutcome]]


def _project_resource(project: Project) -> Resource:
    return Resource(
        uri=project_uri(project["id"]),  # type: ignore[arg-type]
        name=project["name"],
        description=f"Backlog project: {project['name']} ({project['projectKey']})",
        mimeType=JSON_MIME_TYPE,
    )


async def _issues_step(client: BacklogClient, project: Project) -> StepOutcome:
    try:
        issues = await client.get_project_issues(project["id"], IssueListQuery(count=PREVIEW_ISSUE_COUNT))
    except BacklogError as exc:
        logger.warning("Skipping issue preview for project %s: %s", project["id"], exc)
        return StepOutcome(ok=False)
    return StepOutcome(
        entries=[
            Resource(
                uri=issue_uri(issue["id"]),  # type: ignore[arg-type]
                name=f"{issue['issueKey']}: {issue['summary']}",
                description=f"Backlog issue in {project['projectKey']}: {issue['summary']}",
                mimeType=JSON_MIME_TYPE,
            )
            for issue in issues
        ]
    )


async def _wiki_step(client: BacklogClient, project: Project) -> StepOutcome:
    try:
        pages = await client.get_wiki_pages(WikiListQuery(project_id_or_key=str(project["id"])))
    except BacklogError as exc:
        logger.warning("Skipping wiki preview for project %s: %s", project["id"], exc)
        return StepOutcome(ok=False)
    return StepOutcome(
        entries=[
            Resource(
                uri=wiki_uri(page["id"]),  # type: ignore[arg-type]
                name=page["name"],
                description=f"Backlog wiki page in {project['projectKey']}: {page['name']}",
                mimeType=JSON_MIME_TYPE,
            )
            for page in pages[:PREVIEW_WIKI_COUNT]
        ]
    )


# Order matters: wiki pages are only listed once issues succeeded.
PREVIEW_STEPS: tuple[ListingStep, ...] = (_issues_step, _wiki_step)


async def list_resources(client: BacklogClient, steps: Sequence[ListingStep] = PREVIEW_STEPS) -> list[Resource]:
    """List recently viewed projects, then best-effort previews of the first one.

    Failure to fetch the projects themselves propagates; preview failures only
    truncate the output.
    """
    recent = await client.get_recently_viewed_projects(RecentProjectsQuery(count=LIST_PROJECT_COUNT))
    resources = [_project_resource(item["project"]) for item in recent]
    if not recent:
        return resources

    first = recent[0]["project"]
    for step in steps:
        outcome = await step(client, first)
        if not outcome.ok:
            break
        resources.extend(outcome.entries)
    return resources


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


LookupStep = Callable[[BacklogClient, str], Awaitable[Any | None]]


async def _project_direct(client: BacklogClient, project_id: str) -> Project | None:
    try:
        return await client.get_project(project_id)
    except BacklogError as exc:
        logger.info("Direct lookup of project %s failed, scanning recent projects: %s", project_id, exc)
        return None


async def _project_recent_scan(client: BacklogClient, project_id: str) -> Project | None:
    try:
        recent = await client.get_recently_viewed_projects(RecentProjectsQuery(count=PROJECT_SCAN_COUNT))
    except BacklogError as exc:
        logger.info("Recent-project scan for %s failed: %s", project_id, exc)
        return None
    for item in recent:
        if str(item["project"]["id"]) == project_id:
            return item["project"]
    return None


async def _issue_direct(client: BacklogClient, issue_id: str) -> Any | None:
    try:
        return await client.get_issue(issue_id)
    except BacklogError as exc:
        logger.info("Lookup of issue %s failed: %s", issue_id, exc)
        return None


async def _wiki_direct(client: BacklogClient, wiki_id: str) -> Any | None:
    try:
        return await client.get_wiki_page(wiki_id)
    except BacklogError as exc:
        logger.info("Lookup of wiki page %s failed: %s", wiki_id, exc)
        return None


LOOKUPS: dict[ResourceKind, tuple[str, tuple[LookupStep, ...]]] = {
    ResourceKind.PROJECT: ("Project", (_project_direct, _project_recent_scan)),
    ResourceKind.ISSUE: ("Issue", (_issue_direct,)),
    ResourceKind.WIKI: ("Wiki page", (_wiki_direct,)),
}


def _check_lookup_table() -> None:
    missing = set(ResourceKind) - set(LOOKUPS)
    if missing:
        msg = f"No lookup registered for resource kinds: {sorted(missing)}"
        raise RuntimeError(msg)


_check_lookup_table()


async def read_resource(client: BacklogClient, uri: object) -> ResourceContent:
    """Resolve *uri* to a single JSON content block.

    Raises UnsupportedResourceError for URIs we do not serve and NotFoundError
    when every lookup step came back empty.
    """
    parsed = ResourceURI.parse(uri)
    label, steps = LOOKUPS[parsed.kind]
    for step in steps:
        entity = await step(client, parsed.id)
        if entity is not None:
            return ResourceContent(
                uri=str(uri),
                mimeType=JSON_MIME_TYPE,
                text=json.dumps(entity, indent=2, ensure_ascii=False),
            )
    msg = f"{label} {parsed.id} not found"
    raise NotFoundError(msg)
