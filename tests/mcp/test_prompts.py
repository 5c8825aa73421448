"""Prompt catalog compositions."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from mcp_backlog.client import BacklogClient
from mcp_backlog.errors import NotFoundError, UnknownPromptError
from mcp_backlog.mcp_server import get_prompt, list_prompts
from mcp_backlog.prompts import get_prompt as compose_prompt
from tests._backlog_factory import SPACE, USER, FakeBacklog, project, recent, wiki_page

RECENT = "/users/myself/recentlyViewedProjects"


def _embedded(message: Any) -> tuple[str, Any]:
    assert message.content.type == "resource"
    resource = message.content.resource
    assert resource.mimeType == "application/json"
    return str(resource.uri), json.loads(resource.text)


class TestListPrompts:
    async def test_names_and_no_arguments(self) -> None:
        prompts = await list_prompts()
        assert [p.name for p in prompts] == ["summarize_projects", "analyze_backlog_usage", "summarize_wiki_pages"]
        assert all(p.arguments == [] for p in prompts)
        assert all(p.description for p in prompts)


class TestSummarizeProjects:
    async def test_embeds_each_project(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(1), project(2)))

        result = await compose_prompt(client, "summarize_projects")

        messages = result.messages
        assert len(messages) == 4
        assert all(m.role == "user" for m in messages)
        assert messages[0].content.type == "text"
        assert [_embedded(m)[0] for m in messages[1:3]] == ["backlog://project/1", "backlog://project/2"]
        assert _embedded(messages[1])[1]["projectKey"] == "PRJ1"
        assert messages[-1].content.type == "text"
        (call,) = backlog.calls("GET", RECENT)
        assert call.url.params["count"] == "10"

    async def test_no_recent_projects(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, [])
        result = await compose_prompt(client, "summarize_projects")
        assert [m.content.type for m in result.messages] == ["text", "text"]


class TestAnalyzeUsage:
    async def test_usage_snapshot(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get("/users/myself", USER)
        backlog.get("/space", SPACE)
        backlog.get(RECENT, recent(project(1, name="Alpha"), project(2, name="Beta")))

        result = await compose_prompt(client, "analyze_backlog_usage")

        messages = result.messages
        assert len(messages) == 5
        assert _embedded(messages[1]) == ("backlog://user/myself", USER)
        assert _embedded(messages[2]) == ("backlog://space", SPACE)
        uri, summary = _embedded(messages[3])
        assert uri == "backlog://projects/summary"
        assert summary == {
            "totalProjects": 2,
            "projectNames": ["Alpha", "Beta"],
            "lastUpdated": ["2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z"],
        }
        (call,) = backlog.calls("GET", RECENT)
        assert call.url.params["count"] == "20"

    async def test_any_failure_fails_prompt(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get("/users/myself", USER)
        backlog.fail("GET", "/space", "Forbidden", status=403)
        backlog.get(RECENT, [])
        with pytest.raises(Exception, match="Forbidden"):
            await compose_prompt(client, "analyze_backlog_usage")


class TestSummarizeWiki:
    async def test_no_projects(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, [])
        with pytest.raises(NotFoundError, match="No recent projects found"):
            await compose_prompt(client, "summarize_wiki_pages")
        assert backlog.calls("GET", "/wikis") == []

    async def test_first_project_pages_in_order(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(7, "SEVEN", "Seventh"), project(8)))
        backlog.get("/wikis", [wiki_page(i, 7) for i in range(30, 18, -1)])

        def detail(request: httpx.Request) -> httpx.Response:
            wiki_id = int(request.url.path.rsplit("/", 1)[1])
            return httpx.Response(200, json=wiki_page(wiki_id, 7, content=f"body {wiki_id}"))

        for wiki_id in range(19, 31):
            backlog.respond("GET", f"/wikis/{wiki_id}", detail)

        result = await compose_prompt(client, "summarize_wiki_pages")

        messages = result.messages
        assert "Seventh (SEVEN)" in messages[0].content.text
        embedded = [_embedded(m) for m in messages[1:-1]]
        assert [uri for uri, _ in embedded] == [f"backlog://wiki/{i}" for i in range(30, 20, -1)]
        assert embedded[0][1]["content"] == "body 30"
        assert len(backlog.calls("GET")) == 1 + 1 + 10
        (listing,) = backlog.calls("GET", "/wikis")
        assert listing.url.params["projectIdOrKey"] == "7"

    async def test_order_kept_when_details_finish_out_of_order(
        self, backlog: FakeBacklog, client: BacklogClient
    ) -> None:
        backlog.get(RECENT, recent(project(1)))
        backlog.get("/wikis", [wiki_page(i) for i in range(1, 6)])
        finished: list[int] = []

        async def slow_detail(request: httpx.Request) -> httpx.Response:
            wiki_id = int(request.url.path.rsplit("/", 1)[1])
            await asyncio.sleep(0.02 * (6 - wiki_id))
            finished.append(wiki_id)
            return httpx.Response(200, json=wiki_page(wiki_id, content=f"body {wiki_id}"))

        for wiki_id in range(1, 6):
            backlog.respond("GET", f"/wikis/{wiki_id}", slow_detail)

        result = await compose_prompt(client, "summarize_wiki_pages")

        assert finished != sorted(finished)
        embedded = [_embedded(m) for m in result.messages[1:-1]]
        assert [uri for uri, _ in embedded] == [f"backlog://wiki/{i}" for i in range(1, 6)]
        assert [page["content"] for _, page in embedded] == [f"body {i}" for i in range(1, 6)]

    async def test_detail_failure_fails_prompt(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(1)))
        backlog.get("/wikis", [wiki_page(1), wiki_page(2)])
        backlog.get("/wikis/1", wiki_page(1, content="x"))
        backlog.fail("GET", "/wikis/2", "No wiki.")
        with pytest.raises(Exception, match="No wiki"):
            await compose_prompt(client, "summarize_wiki_pages")


class TestDispatch:
    async def test_unknown_prompt(self, client: BacklogClient) -> None:
        with pytest.raises(UnknownPromptError, match="Unknown prompt: nope"):
            await compose_prompt(client, "nope")

    async def test_server_handler(self, backlog: FakeBacklog, mcp_client: BacklogClient) -> None:
        backlog.get(RECENT, [])
        result = await get_prompt("summarize_projects", None)
        assert len(result.messages) == 2
