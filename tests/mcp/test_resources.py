"""Resource catalog: listing with best-effort previews, URI resolution."""

from __future__ import annotations

import json
import logging

import pytest

from mcp_backlog.client import BacklogClient
from mcp_backlog.errors import BacklogAPIError, NotFoundError, UnsupportedResourceError
from mcp_backlog.mcp_server import list_resources, read_resource
from mcp_backlog.resources import list_resources as catalog_list_resources
from mcp_backlog.resources import read_resource as catalog_read_resource
from mcp_backlog.uri import ResourceURI
from tests._backlog_factory import FakeBacklog, issue, project, recent, wiki_page

RECENT = "/users/myself/recentlyViewedProjects"


def _uris(resources: list) -> list[str]:  # type: ignore[type-arg]
    return [str(r.uri) for r in resources]


class TestListResources:
    async def test_projects_then_issues_then_wikis(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(1, "ALPHA"), project(2, "BETA")))
        backlog.get("/projects/1/issues", [issue(10), issue(11)])
        backlog.get("/wikis", [wiki_page(100), wiki_page(101)])

        resources = await catalog_list_resources(client)

        assert _uris(resources) == [
            "backlog://project/1",
            "backlog://project/2",
            "backlog://issue/10",
            "backlog://issue/11",
            "backlog://wiki/100",
            "backlog://wiki/101",
        ]
        assert resources[0].name == "Project 1"
        assert resources[0].description == "Backlog project: Project 1 (ALPHA)"
        assert all(r.mimeType == "application/json" for r in resources)

    async def test_previews_target_first_project(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(1), project(2)))
        backlog.get("/projects/1/issues", [])
        backlog.get("/wikis", [])

        await catalog_list_resources(client)

        (issues_call,) = backlog.calls("GET", "/projects/1/issues")
        assert issues_call.url.params["count"] == "10"
        (wiki_call,) = backlog.calls("GET", "/wikis")
        assert wiki_call.url.params["projectIdOrKey"] == "1"

    async def test_wiki_preview_limited_to_ten(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(1)))
        backlog.get("/projects/1/issues", [])
        backlog.get("/wikis", [wiki_page(i) for i in range(1, 16)])

        resources = await catalog_list_resources(client)
        assert _uris(resources)[1:] == [f"backlog://wiki/{i}" for i in range(1, 11)]

    async def test_empty_recent_list_skips_previews(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, [])
        assert await catalog_list_resources(client) == []
        assert len(backlog.requests) == 1

    async def test_issue_failure_returns_projects_only(
        self, backlog: FakeBacklog, client: BacklogClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        backlog.get(RECENT, recent(project(3), project(1), project(2)))
        backlog.fail("GET", "/projects/3/issues", "Forbidden", status=403, code=11)
        backlog.get("/wikis", [wiki_page(100)])

        with caplog.at_level(logging.WARNING, logger="mcp_backlog.resources"):
            resources = await catalog_list_resources(client)

        assert _uris(resources) == ["backlog://project/3", "backlog://project/1", "backlog://project/2"]
        assert backlog.calls("GET", "/wikis") == []
        assert "Skipping issue preview" in caplog.text

    async def test_wiki_failure_keeps_issues(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(1)))
        backlog.get("/projects/1/issues", [issue(10)])
        backlog.fail("GET", "/wikis", "Wiki disabled", status=403)

        resources = await catalog_list_resources(client)
        assert _uris(resources) == ["backlog://project/1", "backlog://issue/10"]

    async def test_project_failure_propagates(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.fail("GET", RECENT, "Authentication failure", status=401, code=11)
        with pytest.raises(BacklogAPIError, match="Authentication failure"):
            await catalog_list_resources(client)

    async def test_listed_uris_round_trip(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get(RECENT, recent(project(1)))
        backlog.get("/projects/1/issues", [issue(10)])
        backlog.get("/wikis", [wiki_page(100)])

        for uri in _uris(await catalog_list_resources(client)):
            assert ResourceURI.parse(uri).render() == uri


class TestReadResource:
    async def test_project_direct(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get("/projects/5", project(5, "FIVE"))
        content = await catalog_read_resource(client, "backlog://project/5")
        assert content["uri"] == "backlog://project/5"
        assert content["mimeType"] == "application/json"
        assert json.loads(content["text"])["projectKey"] == "FIVE"
        assert content["text"].startswith("{\n  ")
        assert backlog.calls("GET", RECENT) == []

    async def test_project_falls_back_to_recent_scan(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.fail("GET", "/projects/5", "No project.", status=404)
        backlog.get(RECENT, recent(project(4), project(5, "FIVE")))

        content = await catalog_read_resource(client, "backlog://project/5")

        assert json.loads(content["text"])["projectKey"] == "FIVE"
        (scan,) = backlog.calls("GET", RECENT)
        assert scan.url.params["count"] == "100"

    async def test_project_not_found_anywhere(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.fail("GET", "/projects/77", "No project.", status=404)
        backlog.get(RECENT, recent(project(4)))
        with pytest.raises(NotFoundError, match="Project 77 not found"):
            await catalog_read_resource(client, "backlog://project/77")

    async def test_project_not_found_when_scan_also_fails(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.fail("GET", "/projects/77", "No project.", status=404)
        backlog.fail("GET", RECENT, "Server error", status=500)
        with pytest.raises(NotFoundError, match="77"):
            await catalog_read_resource(client, "backlog://project/77")

    async def test_issue(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get("/issues/10", issue(10))
        content = await catalog_read_resource(client, "backlog://issue/10")
        assert json.loads(content["text"])["issueKey"] == "PRJ1-10"

    async def test_issue_not_found_has_no_fallback(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.fail("GET", "/issues/10", "No issue.")
        with pytest.raises(NotFoundError, match="Issue 10 not found"):
            await catalog_read_resource(client, "backlog://issue/10")
        assert len(backlog.requests) == 1

    async def test_wiki_detail(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.get("/wikis/100", wiki_page(100, content="# Home"))
        content = await catalog_read_resource(client, "backlog://wiki/100")
        assert json.loads(content["text"])["content"] == "# Home"

    async def test_wiki_not_found(self, backlog: FakeBacklog, client: BacklogClient) -> None:
        backlog.fail("GET", "/wikis/100", "No wiki.")
        with pytest.raises(NotFoundError, match="Wiki page 100 not found"):
            await catalog_read_resource(client, "backlog://wiki/100")

    @pytest.mark.parametrize("uri", ["backlog://user/1", "backlog://space", "https://example.com/project/1"])
    async def test_unsupported_uri(self, backlog: FakeBacklog, client: BacklogClient, uri: str) -> None:
        with pytest.raises(UnsupportedResourceError, match="Unsupported resource URI"):
            await catalog_read_resource(client, uri)
        assert backlog.requests == []


class TestServerHandlers:
    async def test_list_resources_handler(self, backlog: FakeBacklog, mcp_client: BacklogClient) -> None:
        backlog.get(RECENT, [])
        assert await list_resources() == []

    async def test_read_resource_handler(self, backlog: FakeBacklog, mcp_client: BacklogClient) -> None:
        backlog.get("/issues/10", issue(10))
        (content,) = list(await read_resource("backlog://issue/10"))
        assert content.mime_type == "application/json"
        assert json.loads(content.content)["id"] == 10
