# src/boostrunner/runtime/__init__.py

"""
Runtime components: the session coordinator and the watch orchestrator.
"""

from .coordinator import SessionCoordinator
from .host_interface import HostInterface
from .state import CoordinatorState, CoordinatorStatus

__all__ = ["CoordinatorState", "CoordinatorStatus", "HostInterface", "SessionCoordinator"]
