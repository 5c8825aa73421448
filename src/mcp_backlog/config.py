"""Environment-based configuration for the Backlog MCP server.

Two settings are required: ``BACKLOG_API_KEY`` and ``BACKLOG_SPACE_URL``.
Both are read once at start-up and never change for the process lifetime.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from mcp_backlog.errors import ConfigurationError

API_KEY_ENV = "BACKLOG_API_KEY"
SPACE_URL_ENV = "BACKLOG_SPACE_URL"
TIMEOUT_ENV = "BACKLOG_TIMEOUT"
LOG_FILE_ENV = "BACKLOG_LOG_FILE"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class BacklogConfig:
    """Credential plus transport settings for one Backlog space."""

    api_key: str
    space_url: str
    timeout: float = DEFAULT_TIMEOUT
    log_file: Path | None = None

    def __repr__(self) -> str:
        # Keep the API key out of tracebacks and log lines.
        return f"BacklogConfig(space_url={self.space_url!r}, timeout={self.timeout!r}, log_file={self.log_file!r})"


def _normalize_space_url(raw: str) -> str:
    parts = urlsplit(raw)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        msg = f"{SPACE_URL_ENV} must be an http(s) URL, got {raw!r}"
        raise ConfigurationError(msg)
    return raw.rstrip("/")


def _parse_timeout(raw: str | None) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        msg = f"{TIMEOUT_ENV} must be a number of seconds, got {raw!r}"
        raise ConfigurationError(msg) from None
    if value <= 0:
        msg = f"{TIMEOUT_ENV} must be positive, got {raw!r}"
        raise ConfigurationError(msg)
    return value


def load_config(environ: Mapping[str, str] | None = None) -> BacklogConfig:
    """Build a :class:`BacklogConfig` from environment variables.

    Raises ConfigurationError naming the first missing or invalid setting.
    """
    env = os.environ if environ is None else environ

    api_key = env.get(API_KEY_ENV, "").strip()
    if not api_key:
        msg = f"{API_KEY_ENV} environment variable is required"
        raise ConfigurationError(msg)

    space_url = env.get(SPACE_URL_ENV, "").strip()
    if not space_url:
        msg = f"{SPACE_URL_ENV} environment variable is required"
        raise ConfigurationError(msg)

    log_file = env.get(LOG_FILE_ENV, "").strip()
    return BacklogConfig(
        api_key=api_key,
        space_url=_normalize_space_url(space_url),
        timeout=_parse_timeout(env.get(TIMEOUT_ENV)),
        log_file=Path(log_file).expanduser() if log_file else None,
    )
