#
# config/loader.py
#
"""
Loads and validates the TOML configuration file.
"""

import tomllib
from pathlib import Path
from typing import Any

import structlog

from boostrunner.exceptions import ConfigurationError
from boostrunner.telemetry import StructLogger

from .models import BoostRunnerConfig, ExecutableConfig, GlobalConfig

log: StructLogger = structlog.get_logger("config.loader")


def _resolve(base_dir: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def _build_executable(section: Any, base_dir: Path) -> ExecutableConfig:
    if not isinstance(section, dict):
        raise ConfigurationError("[executable] must be a table.")

    path = section.get("path")
    if not isinstance(path, str) or not path:
        raise ConfigurationError("[executable] requires a non-empty 'path' string.")

    working_dir = _resolve(base_dir, section.get("working_dir", "."))
    source_prefix = section.get("source_prefix")

    return ExecutableConfig(
        path=Path(path),
        working_dir=working_dir,
        # The prefix is relative to the working directory, like the executable.
        source_prefix=_resolve(working_dir, source_prefix) if source_prefix else None,
        list_format=section.get("list_format", "dot"),
    )


def load_config(config_path: Path) -> BoostRunnerConfig:
    """
    Loads configuration from a TOML file.

    Relative paths in the file resolve against the file's own directory.

    Raises:
        ConfigurationError: The file cannot be read, parsed or validated.
    """
    load_log = log.bind(config_path=str(config_path))
    load_log.debug("Loading configuration", emoji_key="path")

    try:
        with config_path.open("rb") as f:
            raw = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Configuration file not found: '{config_path}'") from e
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Failed to read configuration '{config_path}': {e}") from e

    base_dir = config_path.resolve().parent

    try:
        global_config = GlobalConfig(**raw.get("global", {}))
        executable_section = raw.get("executable")
        executable = _build_executable(executable_section, base_dir) if executable_section else None
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration in '{config_path}': {e}") from e

    config = BoostRunnerConfig(executable=executable, global_config=global_config)
    load_log.info(
        "Configuration loaded",
        executable=str(executable.path) if executable else None,
        list_format=executable.list_format if executable else None,
    )
    return config

# 🔼⚙️
