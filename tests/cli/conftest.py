"""Fixtures for CLI interface tests."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from mcp_backlog.config import API_KEY_ENV, LOG_FILE_ENV, SPACE_URL_ENV, TIMEOUT_ENV
from tests._backlog_factory import API_KEY, SPACE_URL


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def backlog_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the CLI at the fake space."""
    monkeypatch.setenv(API_KEY_ENV, API_KEY)
    monkeypatch.setenv(SPACE_URL_ENV, SPACE_URL)
    monkeypatch.delenv(TIMEOUT_ENV, raising=False)
    monkeypatch.delenv(LOG_FILE_ENV, raising=False)


@pytest.fixture
def no_backlog_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in (API_KEY_ENV, SPACE_URL_ENV, TIMEOUT_ENV, LOG_FILE_ENV):
        monkeypatch.delenv(var, raising=False)
