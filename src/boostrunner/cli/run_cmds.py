# src/boostrunner/cli/run_cmds.py

import asyncio

import click
import structlog
from rich.console import Console

from boostrunner.cli.console import ConsoleObserver
from boostrunner.cli.utils import executable_options, logging_options, resolve_executable, setup_command_logging
from boostrunner.runtime.coordinator import SessionCoordinator
from boostrunner.telemetry import StructLogger
from boostrunner.testing.executable import TestExecutable

log: StructLogger = structlog.get_logger("cli.run")


async def _discover_and_run(executable: TestExecutable, test_ids: list[str], observer: ConsoleObserver) -> bool:
    async with SessionCoordinator(executable, observer, watch=False) as coordinator:
        catalog = await coordinator.load()
        if catalog is None:
            return False

        unknown = [test_id for test_id in test_ids if test_id not in catalog]
        if unknown:
            log.warning("Requested tests are not in the catalog", ids=unknown)

        return await coordinator.run(test_ids or [catalog.root_id])


@click.command(name="run")
@click.argument("test_ids", nargs=-1)
@executable_options
@logging_options
@click.pass_context
def run_cli(ctx: click.Context, test_ids: tuple[str, ...], **kwargs):
    """Run TEST_IDS (suites or suite/case), or every test when none are given."""
    setup_command_logging(ctx, kwargs)
    executable = resolve_executable(ctx, kwargs)
    log.info("Executing 'run' command", executable=str(executable.path), ids=list(test_ids))

    observer = ConsoleObserver(Console())
    try:
        success = asyncio.run(_discover_and_run(executable, list(test_ids), observer))
    except KeyboardInterrupt:
        log.warning("Run interrupted by KeyboardInterrupt (CTRL-C).")
        ctx.exit(130)

    if not success or observer.has_failures:
        ctx.exit(1)

# 🔼⚙️
