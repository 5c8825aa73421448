"""Command-line entry point for mcp-backlog.

Usage:
    mcp-backlog serve                 # Run the MCP server over stdio
    mcp-backlog tools                 # Print the tool catalog as JSON
    mcp-backlog prompts               # Print the prompt catalog as JSON
    mcp-backlog check                 # Verify credentials against the space
"""

from __future__ import annotations

import asyncio
import dataclasses
import json as json_mod
import sys
from pathlib import Path
from typing import Any

import click

from mcp_backlog import __version__
from mcp_backlog.client import BacklogClient
from mcp_backlog.config import BacklogConfig, load_config
from mcp_backlog.errors import BacklogError, ConfigurationError


def _load_config_or_exit() -> BacklogConfig:
    try:
        return load_config()
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="mcp-backlog")
def cli() -> None:
    """Backlog MCP server and helpers."""


@cli.command()
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Also write JSON logs here")
def serve(log_file: Path | None) -> None:
    """Run the MCP server over stdio."""
    from mcp_backlog.mcp_server import _run

    config = _load_config_or_exit()
    if log_file is not None:
        config = dataclasses.replace(config, log_file=log_file)
    asyncio.run(_run(config))


@cli.command()
def tools() -> None:
    """Print the tool catalog (names, descriptions, input schemas) as JSON."""
    from mcp_backlog.mcp_server import _TOOLS

    payload = [{"name": t.name, "description": t.description, "inputSchema": t.inputSchema} for t in _TOOLS]
    click.echo(json_mod.dumps(payload, indent=2))


@cli.command()
def prompts() -> None:
    """Print the prompt catalog as JSON."""
    from mcp_backlog.prompts import list_prompts

    payload = [{"name": p.name, "description": p.description} for p in list_prompts()]
    click.echo(json_mod.dumps(payload, indent=2))


async def _check(config: BacklogConfig) -> dict[str, Any]:
    async with BacklogClient(config) as client:
        user, space = await asyncio.gather(client.get_myself(), client.get_space())
    return {"user": user, "space": space}


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check(as_json: bool) -> None:
    """Verify the configured credentials by fetching the user and the space."""
    config = _load_config_or_exit()
    try:
        result = asyncio.run(_check(config))
    except BacklogError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json_mod.dumps(result, indent=2, ensure_ascii=False))
        return
    user, space = result["user"], result["space"]
    click.echo(f"Space: {space.get('name')} ({space.get('spaceKey')}) at {config.space_url}")
    click.echo(f"User:  {user.get('name')} ({user.get('userId')})")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
