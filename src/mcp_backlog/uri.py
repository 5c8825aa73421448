"""Resource URI codec: ``(kind, id) <-> backlog://kind/id``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from mcp_backlog.errors import UnsupportedResourceError

SCHEME = "backlog"

_URI_RE = re.compile(r"\Abacklog://(?P<kind>[a-z]+)/(?P<id>[0-9]+)/?\Z")


class ResourceKind(StrEnum):
    PROJECT = "project"
    ISSUE = "issue"
    WIKI = "wiki"


@dataclass(frozen=True)
class ResourceURI:
    kind: ResourceKind
    id: str

    def __post_init__(self) -> None:
        if not (self.id.isascii() and self.id.isdigit()):
            msg = f"Resource id must be numeric, got {self.id!r}"
            raise UnsupportedResourceError(msg)

    @classmethod
    def of(cls, kind: ResourceKind, entity_id: int | str) -> ResourceURI:
        return cls(kind, str(entity_id))

    def render(self) -> str:
        return f"{SCHEME}://{self.kind.value}/{self.id}"

    @classmethod
    def parse(cls, uri: object) -> ResourceURI:
        """Parse *uri* (a ``str`` or anything whose ``str()`` is the URI).

        Raises UnsupportedResourceError for other schemes, unknown kinds and
        non-numeric ids.
        """
        text = str(uri)
        match = _URI_RE.match(text)
        if match is None:
            msg = f"Unsupported resource URI: {text}"
            raise UnsupportedResourceError(msg)
        try:
            kind = ResourceKind(match["kind"])
        except ValueError:
            msg = f"Unsupported resource URI: {text}"
            raise UnsupportedResourceError(msg) from None
        return cls(kind, match["id"])

    def __str__(self) -> str:
        return self.render()


def project_uri(project_id: int | str) -> str:
    return ResourceURI.of(ResourceKind.PROJECT, project_id).render()


def issue_uri(issue_id: int | str) -> str:
    return ResourceURI.of(ResourceKind.ISSUE, issue_id).render()


def wiki_uri(wiki_id: int | str) -> str:
    return ResourceURI.of(ResourceKind.WIKI, wiki_id).render()
