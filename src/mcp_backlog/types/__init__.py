# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""Typed contracts for Backlog payloads and MCP tool arguments."""

from __future__ import annotations

from mcp_backlog.types.api import (
    Comment,
    Issue,
    Project,
    RecentlyViewedProject,
    ResourceContent,
    Space,
    User,
    WikiPage,
    WikiPageDetail,
)

__all__ = [
    "Comment",
    "Issue",
    "Project",
    "RecentlyViewedProject",
    "ResourceContent",
    "Space",
    "User",
    "WikiPage",
    "WikiPageDetail",
]
