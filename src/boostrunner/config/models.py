#
# config/models.py
#
"""
Attrs-based data models for boostrunner configuration structure.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from attrs import define, field

if TYPE_CHECKING:
    from boostrunner.testing.executable import TestExecutable

LIST_FORMATS = ("plain", "dot")


def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging.getLevelNamesMapping().keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_list_format(inst: Any, attr: Any, value: str) -> None:
    if value not in LIST_FORMATS:
        raise ValueError(f"Invalid {attr.name} '{value}'. Must be one of {list(LIST_FORMATS)}.")


@define(frozen=True, slots=True)
class ExecutableConfig:
    """Where the test executable lives and how to read its listing."""
    path: Path = field(converter=Path)
    working_dir: Path = field(factory=Path.cwd, converter=Path)
    source_prefix: Path | None = field(default=None)
    list_format: str = field(default="dot", validator=_validate_list_format)

    def to_executable(self) -> "TestExecutable":
        from boostrunner.testing.executable import TestExecutable

        return TestExecutable(
            path=self.path,
            working_dir=self.working_dir,
            source_prefix=self.source_prefix,
            list_format=self.list_format,
        )


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for boostrunner."""
    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelNamesMapping()[self.log_level.upper()]


@define(frozen=True, slots=True)
class BoostRunnerConfig:
    """Root configuration object for the boostrunner application."""
    executable: ExecutableConfig | None = field(default=None)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})


# 🔼⚙️
