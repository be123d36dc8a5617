# src/boostrunner/runtime/state.py
#
"""
Defines the lifecycle state of a session coordinator.
"""

from datetime import UTC, datetime
from enum import Enum, auto

import structlog
from attrs import field, mutable

log: structlog.stdlib.BoundLogger = structlog.get_logger("runtime.state")


class CoordinatorStatus(Enum):
    """What the coordinator is currently doing with its executable."""

    IDLE = auto()
    DISCOVERING = auto()  # Listing tests.
    RUNNING = auto()  # Executing a run request.


@mutable(slots=True)
class CoordinatorState:
    """
    Mutable status record for one coordinator.

    Only the holder of the coordinator's gate moves it out of IDLE.
    """

    status: CoordinatorStatus = field(default=CoordinatorStatus.IDLE)
    last_discovery: datetime | None = field(default=None)
    last_run: datetime | None = field(default=None)
    last_error: str | None = field(default=None)
    cancel_requested: bool = field(default=False)

    def update_status(self, new_status: CoordinatorStatus) -> None:
        old_status = self.status
        if old_status == new_status:
            return
        if old_status is not CoordinatorStatus.IDLE and new_status is not CoordinatorStatus.IDLE:
            raise RuntimeError(f"Illegal transition {old_status.name} -> {new_status.name}")

        self.status = new_status
        now_utc = datetime.now(UTC)
        if old_status is CoordinatorStatus.DISCOVERING:
            self.last_discovery = now_utc
        elif old_status is CoordinatorStatus.RUNNING:
            self.last_run = now_utc
            self.cancel_requested = False

        log.debug("Coordinator status changed", old_status=old_status.name, new_status=new_status.name)

    def record_error(self, error: BaseException) -> None:
        self.last_error = f"{type(error).__name__}: {error}"

# 🔼⚙️
