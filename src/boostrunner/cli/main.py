# src/boostrunner/cli/main.py

"""
The `boostrunner` command group. Subcommands live in the *_cmds modules;
this module only wires them together and applies the global log options.
"""

from importlib.metadata import PackageNotFoundError, version

import click
import structlog

from boostrunner.cli.list_cmds import list_cli
from boostrunner.cli.run_cmds import run_cli
from boostrunner.cli.utils import logging_options, setup_logging_from_context
from boostrunner.cli.watch_cmds import watch_cli
from boostrunner.telemetry import StructLogger

try:
    __version__ = version("boostrunner")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

log: StructLogger = structlog.get_logger("cli.main")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="boostrunner")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    Drive a Boost.Test binary from the terminal.

    `list` shows the suites and cases the binary reports, `run` executes all
    of them or the given SUITE and SUITE/CASE ids with live progress, and
    `watch` rediscovers whenever the binary is rebuilt.

    Settings come from CLI options first, then BOOSTRUNNER_* environment
    variables, then boostrunner.toml.
    """
    ctx.ensure_object(dict)

    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = json_logs if json_logs is not None else False

    setup_logging_from_context(ctx)
    log.debug("Command group ready", invoked=ctx.invoked_subcommand, log_level=log_level or "default")


cli.add_command(list_cli)
cli.add_command(run_cli)
cli.add_command(watch_cli)

# 🖥️⚙️
