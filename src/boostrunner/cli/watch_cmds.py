# src/boostrunner/cli/watch_cmds.py

import asyncio
import logging
import sys
from pathlib import Path

import click
import structlog
from rich.console import Console

from boostrunner.cli.console import ConsoleObserver
from boostrunner.cli.utils import logging_options, setup_command_logging
from boostrunner.runtime.orchestrator import WatchOrchestrator
from boostrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.watch")


def _run_headless_orchestrator(orchestrator: WatchOrchestrator) -> int:
    """
    Runs the orchestrator with asyncio.run(), which cancels the main task on
    SIGINT so the orchestrator's cleanup still runs.
    """
    try:
        asyncio.run(orchestrator.run())
        return 0
    except KeyboardInterrupt:
        log.warning("Shutdown initiated by KeyboardInterrupt (CTRL-C).")
        return 130
    except Exception:
        log.critical("Orchestrator exited with an unhandled exception.", exc_info=True)
        return 1
    finally:
        logging.shutdown()


@click.command(name="watch")
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    default=Path("boostrunner.toml"),
    show_default=True,
    envvar="BOOSTRUNNER_CONF",
    help="Path to the boostrunner configuration file (env var BOOSTRUNNER_CONF).",
    show_envvar=True,
)
@click.option(
    "-e",
    "--executable",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Test executable to use (overrides the configuration file).",
)
@logging_options
@click.pass_context
def watch_cli(ctx: click.Context, config_path: Path, executable: Path | None, **kwargs):
    """Rediscover tests whenever the executable or the configuration changes."""
    shutdown_event = asyncio.Event()
    setup_command_logging(ctx, kwargs)

    log.info("Initializing watch command...")

    orchestrator = WatchOrchestrator(
        config_path=config_path,
        shutdown_event=shutdown_event,
        observer=ConsoleObserver(Console(), show_catalog=True),
        executable_override=executable,
    )

    exit_code = _run_headless_orchestrator(orchestrator)

    log.info("'watch' command finished.")
    if exit_code != 0:
        sys.exit(exit_code)

# 🔼⚙️
