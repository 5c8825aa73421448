"""Prompt catalog: multi-call compositions rendered as one conversation.

Each prompt interleaves instruction text with embedded JSON snapshots of the
upstream entities it fetched.  Every message has role ``user``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from enum import StrEnum

from mcp.types import (
    EmbeddedResource,
    GetPromptResult,
    Prompt,
    PromptMessage,
    TextContent,
    TextResourceContents,
)

from mcp_backlog.client import BacklogClient, RecentProjectsQuery, WikiListQuery
from mcp_backlog.errors import NotFoundError, UnknownPromptError
from mcp_backlog.resources import JSON_MIME_TYPE
from mcp_backlog.types.api import ProjectsSummary, WikiPageDetail
from mcp_backlog.uri import project_uri, wiki_uri

logger = logging.getLogger(__name__)

SUMMARY_PROJECT_COUNT = 10
USAGE_PROJECT_COUNT = 20
WIKI_PROJECT_COUNT = 5
WIKI_PAGE_LIMIT = 10
# Upper bound on simultaneous wiki detail requests.
WIKI_DETAIL_CONCURRENCY = 3

USER_URI = "backlog://user/myself"
SPACE_URI = "backlog://space"
PROJECTS_SUMMARY_URI = "backlog://projects/summary"


class PromptName(StrEnum):
    SUMMARIZE_PROJECTS = "summarize_projects"
    ANALYZE_BACKLOG_USAGE = "analyze_backlog_usage"
    SUMMARIZE_WIKI_PAGES = "summarize_wiki_pages"


_DESCRIPTIONS: dict[PromptName, str] = {
    PromptName.SUMMARIZE_PROJECTS: "Summarize recently viewed Backlog projects",
    PromptName.ANALYZE_BACKLOG_USAGE: "Analyze your Backlog usage patterns",
    PromptName.SUMMARIZE_WIKI_PAGES: "Summarize the wiki pages of your most recently viewed project",
}


def list_prompts() -> list[Prompt]:
    return [Prompt(name=name.value, description=_DESCRIPTIONS[name], arguments=[]) for name in PromptName]


# ---------------------------------------------------------------------------
# Message builders
# ---------------------------------------------------------------------------


def _instruction(text: str) -> PromptMessage:
    return PromptMessage(role="user", content=TextContent(type="text", text=text))


def _embedded(uri: str, payload: object) -> PromptMessage:
    return PromptMessage(
        role="user",
        content=EmbeddedResource(
            type="resource",
            resource=TextResourceContents(
                uri=uri,  # type: ignore[arg-type]
                mimeType=JSON_MIME_TYPE,
                text=json.dumps(payload, indent=2, ensure_ascii=False),
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Compositions
# ---------------------------------------------------------------------------


async def _summarize_projects(client: BacklogClient) -> GetPromptResult:
    recent = await client.get_recently_viewed_projects(RecentProjectsQuery(count=SUMMARY_PROJECT_COUNT))
    messages = [_instruction("Please review the following recent Backlog projects:")]
    messages.extend(_embedded(project_uri(item["project"]["id"]), item["project"]) for item in recent)
    messages.append(
        _instruction(
            "Provide a concise summary of these recent projects, highlighting any patterns or important activities."
        )
    )
    return GetPromptResult(description=_DESCRIPTIONS[PromptName.SUMMARIZE_PROJECTS], messages=messages)


async def _analyze_usage(client: BacklogClient) -> GetPromptResult:
    user, space, recent = await asyncio.gather(
        client.get_myself(),
        client.get_space(),
        client.get_recently_viewed_projects(RecentProjectsQuery(count=USAGE_PROJECT_COUNT)),
    )
    summary = ProjectsSummary(
        totalProjects=len(recent),
        projectNames=[item["project"]["name"] for item in recent],
        lastUpdated=[item["updated"] for item in recent],
    )
    messages = [
        _instruction(
            "I'd like to understand my Backlog usage patterns. Please analyze the following information "
            "about my Backlog account, space, and recent projects:"
        ),
        _embedded(USER_URI, user),
        _embedded(SPACE_URI, space),
        _embedded(PROJECTS_SUMMARY_URI, summary),
        _instruction(
            "Based on this data, please provide insights about how I'm using Backlog, which projects I'm "
            "focusing on recently, and any suggestions for improving my workflow."
        ),
    ]
    return GetPromptResult(description=_DESCRIPTIONS[PromptName.ANALYZE_BACKLOG_USAGE], messages=messages)


async def _fetch_wiki_details(client: BacklogClient, wiki_ids: list[int]) -> list[WikiPageDetail]:
    """Fetch page details concurrently; results keep the order of *wiki_ids*."""
    limiter = asyncio.Semaphore(WIKI_DETAIL_CONCURRENCY)

    async def fetch(wiki_id: int) -> WikiPageDetail:
        async with limiter:
            return await client.get_wiki_page(wiki_id)

    return list(await asyncio.gather(*(fetch(wiki_id) for wiki_id in wiki_ids)))


async def _summarize_wiki(client: BacklogClient) -> GetPromptResult:
    recent = await client.get_recently_viewed_projects(RecentProjectsQuery(count=WIKI_PROJECT_COUNT))
    if not recent:
        msg = "No recent projects found"
        raise NotFoundError(msg)
    project = recent[0]["project"]

    pages = await client.get_wiki_pages(WikiListQuery(project_id_or_key=str(project["id"])))
    details = await _fetch_wiki_details(client, [page["id"] for page in pages[:WIKI_PAGE_LIMIT]])
    logger.debug("Fetched %d wiki pages for project %s", len(details), project["projectKey"])

    messages = [
        _instruction(
            f"Please review the following wiki pages from the Backlog project "
            f"{project['name']} ({project['projectKey']}):"
        )
    ]
    messages.extend(_embedded(wiki_uri(detail["id"]), detail) for detail in details)
    messages.append(
        _instruction(
            "Summarize these wiki pages: describe what each page covers, how they relate to each other, "
            "and point out any documentation that looks outdated or missing."
        )
    )
    return GetPromptResult(description=_DESCRIPTIONS[PromptName.SUMMARIZE_WIKI_PAGES], messages=messages)


async def get_prompt(client: BacklogClient, name: str) -> GetPromptResult:
    """Compose the prompt called *name*.

    Raises UnknownPromptError for names outside :class:`PromptName`.
    """
    try:
        prompt = PromptName(name)
    except ValueError:
        msg = f"Unknown prompt: {name}"
        raise UnknownPromptError(msg) from None

    match prompt:
        case PromptName.SUMMARIZE_PROJECTS:
            return await _summarize_projects(client)
        case PromptName.ANALYZE_BACKLOG_USAGE:
            return await _analyze_usage(client)
        case PromptName.SUMMARIZE_WIKI_PAGES:
            return await _summarize_wiki(client)
