# src/boostrunner/runtime/host_interface.py

"""
Provides a fault-tolerant bridge from the coordinator to the host observer.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from boostrunner.telemetry import StructLogger
from boostrunner.testing.protocols import ProgressEvent, SessionObserver

if TYPE_CHECKING:
    from boostrunner.catalog import Catalog

log: StructLogger = structlog.get_logger("runtime.host_interface")


class HostInterface:
    """
    Forwards lifecycle notifications to an optional observer.

    A failing observer callback is logged and otherwise ignored so it can
    never leave the coordinator's gate held.
    """

    def __init__(self, observer: SessionObserver | None):
        self.observer = observer
        self.is_active = observer is not None

    def _post(self, method: str, *args: object) -> None:
        if not self.is_active or self.observer is None:
            return
        try:
            getattr(self.observer, method)(*args)
        except Exception as e:
            log.warning("Observer callback failed", callback=method, error=str(e), exc_info=True)

    def discovery_started(self) -> None:
        self._post("on_discovery_started")

    def discovery_finished(self, catalog: "Catalog | None") -> None:
        self._post("on_discovery_finished", catalog)

    def run_started(self, ids: Sequence[str]) -> None:
        self._post("on_run_started", list(ids))

    def progress(self, event: ProgressEvent) -> None:
        self._post("on_progress", event)

    def run_finished(self) -> None:
        self._post("on_run_finished")

# 🔼⚙️
