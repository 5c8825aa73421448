"""mcp-backlog: Backlog projects, issues, comments and wiki pages over MCP."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mcp-backlog")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from mcp_backlog.client import BacklogClient
from mcp_backlog.config import BacklogConfig, load_config

__all__ = ["BacklogClient", "BacklogConfig", "__version__", "load_config"]
