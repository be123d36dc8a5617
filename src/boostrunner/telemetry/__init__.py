# src/boostrunner/telemetry/__init__.py

"""
Logging setup and logger type aliases for boostrunner.
"""

from boostrunner.telemetry.logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]
