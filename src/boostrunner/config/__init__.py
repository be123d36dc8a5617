#
# config/__init__.py
#
"""
Configuration handling sub-package for boostrunner.

Exports the loading function and core configuration models.
"""

from .loader import load_config
from .models import (
    LIST_FORMATS,
    BoostRunnerConfig,
    ExecutableConfig,
    GlobalConfig,
)

__all__ = [
    "LIST_FORMATS",
    "BoostRunnerConfig",
    "ExecutableConfig",
    "GlobalConfig",
    "load_config",
]

# 🔼⚙️
