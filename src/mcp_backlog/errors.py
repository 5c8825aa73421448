"""Error taxonomy shared by the client, catalogs and entry points.

Handlers raise these; the MCP SDK turns an exception raised inside
``call_tool`` into an ``isError`` result and one raised inside the other
request handlers into a JSON-RPC error response.
"""

from __future__ import annotations


class BacklogError(Exception):
    """Base class for every error raised by mcp-backlog."""

    code = "error"


class ConfigurationError(BacklogError):
    """A required setting is missing or malformed. Fatal at start-up."""

    code = "configuration_error"


class ValidationError(BacklogError):
    """A tool argument is missing or malformed. Raised before any upstream call."""

    code = "validation_error"


class BacklogAPIError(BacklogError):
    """The upstream API answered with a non-2xx status."""

    code = "upstream_error"

    def __init__(self, message: str, *, error_code: int | None = None, status_code: int | None = None) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(f"Backlog API Error: {message} (Code: {error_code})")


class BacklogConnectionError(BacklogError):
    """The upstream API could not be reached."""

    code = "connection_error"


class NotFoundError(BacklogError):
    """Every lookup strategy for an entity came back empty."""

    code = "not_found"


class UnknownToolError(BacklogError):
    code = "unknown_tool"


class UnknownPromptError(BacklogError):
    code = "unknown_prompt"


class UnsupportedResourceError(BacklogError):
    """A resource URI is malformed or names a kind we do not serve."""

    code = "unsupported_uri"
