"""
Reposcope CLI.

Command Structure: reposcope <command> [options]

Examples:
    reposcope serve
    reposcope repos
    reposcope tools --all
    reposcope --config ./repos.yaml --log-level DEBUG serve
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from reposcope import __version__
from reposcope.config import GatewayConfig, load_config
from reposcope.mcp.gateway import RepoGateway
from reposcope.mcp.server import run_stdio_server

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

console = Console()


def configure_logging(level: str) -> None:
    """Send all logging to stderr; stdout belongs to the protocol."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="reposcope")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Config file (JSON or YAML)")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
@click.pass_context
def cli(ctx, config_path: Optional[Path], log_level: Optional[str]):
    """
    Reposcope - one MCP endpoint for all your local repositories.
    """
    config = load_config(config_path)
    if log_level:
        config.log_level = log_level.upper()
    configure_logging(config.log_level)
    ctx.obj = config


@cli.command()
@click.pass_obj
def serve(config: GatewayConfig):
    """Run the MCP server on stdin/stdout."""
    try:
        asyncio.run(run_stdio_server(config))
    except KeyboardInterrupt:
        click.echo("\nShutting down MCP server...", err=True)


@cli.command()
@click.pass_obj
def repos(config: GatewayConfig):
    """List discovered repositories."""
    gateway = RepoGateway(config)
    asyncio.run(gateway.repos.refresh())

    found = gateway.repos.list()
    if not found:
        console.print("[yellow]No repositories found[/yellow]")
        return

    table = Table(title=f"Repositories ({len(found)})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Tools")
    table.add_column("Path", style="dim")
    for repo in found:
        info = repo.to_dict()
        table.add_row(info["name"], info["type"], info["tools"], info["path"])
    console.print(table)


@cli.command()
@click.option("--all", "load_all", is_flag=True, help="Load every repository's tools first")
@click.pass_obj
def tools(config: GatewayConfig, load_all: bool):
    """List registered tools.

    Without --all only root tools (and eagerly loaded repo tools) show up.
    """
    asyncio.run(_show_tools(config, load_all))


async def _show_tools(config: GatewayConfig, load_all: bool):
    gateway = RepoGateway(config)
    await gateway.initialize()
    if load_all:
        for repo in gateway.repos.list():
            await gateway.ensure_repo_tools(repo.name)

    table = Table(title=f"Tools ({gateway.tools.count()})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    for descriptor in gateway.list_tools():
        table.add_row(descriptor["name"], descriptor["description"])
    console.print(table)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
