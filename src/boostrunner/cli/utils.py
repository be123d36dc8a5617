# src/boostrunner/cli/utils.py

import logging
from pathlib import Path
from typing import Any

import click
import structlog
from attrs import evolve

from boostrunner.config import LIST_FORMATS, load_config
from boostrunner.exceptions import ConfigurationError
from boostrunner.telemetry.logger import setup_logging as core_setup_logging
from boostrunner.testing.executable import TestExecutable

log = structlog.get_logger("cli.utils")

LOG_LEVEL_CHOICES = click.Choice(list(logging.getLevelNamesMapping().keys()), case_sensitive=False)
DEFAULT_CONFIG_PATH = Path("boostrunner.toml")


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="BOOSTRUNNER_LOG_LEVEL",
        help="Set the logging level (overrides config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="BOOSTRUNNER_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="BOOSTRUNNER_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def executable_options(f):
    """Decorator to add the options that locate the test executable."""
    f = click.option(
        "-c",
        "--config-path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        envvar="BOOSTRUNNER_CONF",
        show_envvar=True,
        help=f"Path to the boostrunner configuration file [default: {DEFAULT_CONFIG_PATH}].",
    )(f)
    f = click.option(
        "-e",
        "--executable",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Test executable to use (overrides the configuration file).",
    )(f)
    f = click.option(
        "--source-prefix",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Directory that relative source paths in the listing are resolved against.",
    )(f)
    f = click.option(
        "--list-format",
        type=click.Choice(LIST_FORMATS),
        default=None,
        help="Listing format requested from the executable [default: dot].",
    )(f)
    return f


def setup_logging_from_context(
    ctx: click.Context,
    local_log_level: str | None = None,
    local_log_file: str | None = None,
    local_json_logs: bool | None = None,
    default_log_level: str = "WARNING",
) -> None:
    """
    Setup logging using context values, allowing local overrides.
    """
    log_level_str = local_log_level or ctx.obj.get("LOG_LEVEL") or default_log_level
    log_file_path = local_log_file or ctx.obj.get("LOG_FILE")
    use_json_logs = local_json_logs if local_json_logs is not None else ctx.obj.get("JSON_LOGS", False)

    numeric_level = logging.getLevelNamesMapping().get(log_level_str.upper())
    if numeric_level is None:
        numeric_level = logging.INFO
        log_level_str = "INFO"

    core_setup_logging(
        level=numeric_level,
        json_logs=use_json_logs,
        log_file=log_file_path,
    )

    log.debug(
        "CLI logging initialized via utils",
        level=log_level_str,
        file=log_file_path or "console",
        json=use_json_logs,
    )


def setup_command_logging(ctx: click.Context, kwargs: dict[str, Any]) -> None:
    setup_logging_from_context(
        ctx,
        local_log_level=kwargs.get("log_level"),
        local_log_file=kwargs.get("log_file"),
        local_json_logs=kwargs.get("json_logs"),
    )


def resolve_executable(ctx: click.Context, kwargs: dict[str, Any]) -> TestExecutable:
    """
    Build the TestExecutable a command should drive.

    ``--executable`` wins over the configuration file; the configuration file
    is optional when it is given.
    """
    executable_path: Path | None = kwargs.get("executable")
    config_path: Path | None = kwargs.get("config_path")
    source_prefix: Path | None = kwargs.get("source_prefix")
    list_format: str | None = kwargs.get("list_format")

    if config_path is None and DEFAULT_CONFIG_PATH.is_file():
        config_path = DEFAULT_CONFIG_PATH

    if config_path is None:
        if executable_path is None:
            raise click.UsageError(
                f"No test executable given. Use --executable or provide {DEFAULT_CONFIG_PATH}.", ctx
            )
        return TestExecutable(executable_path, Path.cwd(), source_prefix, list_format or "dot")

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        raise click.ClickException(f"Configuration problem in '{config_path}':\n{e}") from e

    if not (kwargs.get("log_level") or ctx.obj.get("LOG_LEVEL")):
        setup_logging_from_context(
            ctx,
            local_log_file=kwargs.get("log_file"),
            local_json_logs=kwargs.get("json_logs"),
            default_log_level=config.global_config.log_level,
        )

    executable_config = config.executable
    if executable_path is not None:
        if executable_config is None:
            return TestExecutable(executable_path, Path.cwd(), source_prefix, list_format or "dot")
        executable_config = evolve(executable_config, path=executable_path)
    if executable_config is None:
        raise click.ClickException(f"No [executable] section in '{config_path}'.")

    if source_prefix is not None:
        executable_config = evolve(executable_config, source_prefix=source_prefix.resolve())
    if list_format is not None:
        executable_config = evolve(executable_config, list_format=list_format)
    return executable_config.to_executable()

# ⚙️🛠️
