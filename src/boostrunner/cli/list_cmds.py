# src/boostrunner/cli/list_cmds.py

import asyncio

import click
import structlog
from rich.console import Console

from boostrunner.catalog import Catalog
from boostrunner.cli.console import render_catalog
from boostrunner.cli.utils import executable_options, logging_options, resolve_executable, setup_command_logging
from boostrunner.runtime.coordinator import SessionCoordinator
from boostrunner.telemetry import StructLogger
from boostrunner.testing.executable import TestExecutable

log: StructLogger = structlog.get_logger("cli.list")


async def _discover(executable: TestExecutable) -> Catalog | None:
    async with SessionCoordinator(executable, watch=False) as coordinator:
        return await coordinator.load()


@click.command(name="list")
@click.option("--ids", "show_ids", is_flag=True, help="Print one test identifier per line instead of a tree.")
@executable_options
@logging_options
@click.pass_context
def list_cli(ctx: click.Context, show_ids: bool, **kwargs):
    """Discover the executable's tests and print them."""
    setup_command_logging(ctx, kwargs)
    executable = resolve_executable(ctx, kwargs)
    log.info("Executing 'list' command", executable=str(executable.path))

    catalog = asyncio.run(_discover(executable))
    if catalog is None:
        click.echo(f"Error: No tests could be discovered from '{executable.path}'.", err=True)
        ctx.exit(1)

    if show_ids:
        for node in catalog.iter_nodes():
            if node is not catalog.root:
                click.echo(node.id)
    else:
        Console().print(render_catalog(catalog))

# 🔼⚙️
