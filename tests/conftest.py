"""Shared pytest fixtures for mcp-backlog tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest

from mcp_backlog.client import BacklogClient
from tests._backlog_factory import FakeBacklog


@pytest.fixture
def backlog() -> FakeBacklog:
    """Empty fake Backlog API; register routes per test."""
    return FakeBacklog()


@pytest.fixture
async def client(backlog: FakeBacklog) -> AsyncGenerator[BacklogClient, None]:
    """BacklogClient wired to the fake API."""
    c = backlog.client()
    yield c
    await c.aclose()


@pytest.fixture
async def mcp_client(backlog: FakeBacklog) -> AsyncGenerator[BacklogClient, None]:
    """Set up a BacklogClient on the fake API and patch the MCP module global."""
    import mcp_backlog.mcp_server as mcp_mod

    c = backlog.client()
    original = mcp_mod.client
    mcp_mod.client = c

    yield c

    mcp_mod.client = original
    await c.aclose()
