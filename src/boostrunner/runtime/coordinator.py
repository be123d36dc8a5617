# src/boostrunner/runtime/coordinator.py

"""
Serializes discovery and runs against one test executable.

Every load() and run() goes through a single asyncio.Lock, so at most one
process talks to the executable at a time. A watchdog observer on the
executable's directory queues a reload when the binary is rebuilt or removed.
"""

import asyncio
import os
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from boostrunner.catalog import Catalog
from boostrunner.exceptions import ExecutableMissingError
from boostrunner.telemetry import StructLogger
from boostrunner.testing.executable import TestExecutable
from boostrunner.testing.progress import RunOutputParser
from boostrunner.testing.protocols import CaseCancelled, SessionObserver

from .host_interface import HostInterface
from .state import CoordinatorState, CoordinatorStatus

log: StructLogger = structlog.get_logger("runtime.coordinator")
# Linkers touch the output several times in a row; group those into one reload.
DEBOUNCE_DELAY = 0.25


def _watch_root(target: Path) -> tuple[Path, bool]:
    """
    Directory to schedule the watch on, and whether it must be recursive.

    Before the first build the output directory may not exist; the nearest
    existing ancestor is watched recursively until it does.
    """
    directory = target.parent
    while not directory.is_dir() and directory.parent != directory:
        directory = directory.parent
    return directory, directory != target.parent


class ExecutableChangeHandler(FileSystemEventHandler):
    """Reports create/modify/delete of one file to the event loop."""

    def __init__(
        self,
        target: Path,
        loop: asyncio.AbstractEventLoop,
        callback: Callable[[str], None],
    ):
        self._target = os.path.abspath(target)
        self._loop = loop
        self._callback = callback

    def _matches(self, path: str | bytes) -> bool:
        return os.path.abspath(os.fsdecode(path)) == self._target

    def _notify(self, kind: str) -> None:
        try:
            self._loop.call_soon_threadsafe(self._callback, kind)
        except RuntimeError:
            log.debug("Event loop closed, dropping executable change", kind=kind)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self._notify("created")

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self._notify("modified")

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self._notify("deleted")

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        # Build tools often write to a temp file and rename it into place.
        if self._matches(event.dest_path):
            self._notify("created")
        elif self._matches(event.src_path):
            self._notify("deleted")


class SessionCoordinator:
    """Owns the catalog of one executable and the gate guarding it."""

    def __init__(
        self,
        executable: TestExecutable | None,
        observer: SessionObserver | None = None,
        watch: bool = True,
    ):
        self.executable = executable
        self.host = HostInterface(observer)
        self.state = CoordinatorState()
        self.catalog: Catalog | None = None
        self.watch_enabled = watch
        self._gate = asyncio.Lock()
        self._fs_observer: BaseObserver | None = None
        self._watch_target: Path | None = None
        self._reload_handle: asyncio.TimerHandle | None = None
        self._reload_tasks: set[asyncio.Task] = set()
        self._run_task: asyncio.Task | None = None
        self._closed = False

    @property
    def status(self) -> CoordinatorStatus:
        return self.state.status

    @property
    def is_watching(self) -> bool:
        return self._fs_observer is not None

    @property
    def watched_path(self) -> Path | None:
        """The executable path the filesystem watch reports changes for."""
        return self._watch_target

    async def load(self) -> Catalog | None:
        """
        Discover the executable's tests and publish the new catalog.

        Never raises for discovery problems: the catalog becomes None and the
        failure is logged, except a missing executable which simply means
        there are no tests yet.
        """
        async with self._gate:
            # reconfigure() swaps the executable under the gate.
            executable = self.executable
            if executable is None:
                log.info("No test executable is provided in the configuration")
                return None

            load_log = log.bind(executable=str(executable.path))
            self.state.update_status(CoordinatorStatus.DISCOVERING)
            try:
                self.host.discovery_started()
                catalog: Catalog | None
                try:
                    catalog = await executable.list_tests()
                except ExecutableMissingError:
                    load_log.debug("Test executable is not present yet")
                    catalog = None
                except Exception as e:
                    load_log.error("Test discovery failed", error=str(e), exc_info=True, emoji_key="fail")
                    self.state.record_error(e)
                    catalog = None

                self.catalog = catalog
                self.host.discovery_finished(catalog)
            finally:
                self.state.update_status(CoordinatorStatus.IDLE)

            if self.watch_enabled:
                self._ensure_watch(executable)
            return self.catalog

    async def run(self, ids: Sequence[str]) -> bool:
        """
        Run the requested tests, forwarding progress as it is parsed.

        Returns whether the run completed with every test passing. Failures are
        logged, never raised, and the run-finished notification always fires.
        """
        ids = list(ids)

        async with self._gate:
            self.state.update_status(CoordinatorStatus.RUNNING)
            try:
                self.host.run_started(ids)
                if self.executable is None:
                    log.warning("Run requested but no test executable is configured", ids=ids)
                    return False
                return await self._execute_run(self.executable, ids)
            finally:
                self.host.run_finished()
                self.state.update_status(CoordinatorStatus.IDLE)

    async def _execute_run(self, executable: TestExecutable, ids: list[str]) -> bool:
        run_all = self.catalog is not None and self.catalog.is_run_all(ids)
        run_log = log.bind(executable=str(executable.path), ids=ids, run_all=run_all)
        parser = RunOutputParser()

        task = asyncio.create_task(executable.run_tests(None if run_all else ids, self.host.progress, parser))
        self._run_task = task
        try:
            success = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if not self.state.cancel_requested or (current is not None and current.cancelling()):
                raise
            in_flight = parser.in_flight()
            run_log.info("Test run cancelled", in_flight=in_flight)
            if in_flight:
                self.host.progress(CaseCancelled(in_flight))
            return False
        except ExecutableMissingError as e:
            run_log.error("Test executable not found", error=str(e), emoji_key="fail")
            self.state.record_error(e)
            return False
        except Exception as e:
            run_log.error("Test run failed", error=str(e), exc_info=True, emoji_key="fail")
            self.state.record_error(e)
            return False
        finally:
            self._run_task = None

        if not success:
            run_log.warning("Test executable reported failures", emoji_key="fail")
        return success

    def cancel(self) -> None:
        """Terminate the in-flight run, if any. Its running case is reported cancelled."""
        task = self._run_task
        if task is None or task.done():
            log.debug("No test run in flight, nothing to cancel")
            return
        log.info("Cancelling test run")
        self.state.cancel_requested = True
        task.cancel()

    async def reconfigure(self, executable: TestExecutable | None) -> Catalog | None:
        """Switch to a different executable and rediscover."""
        log.info("Reconfiguring coordinator", executable=str(executable.path) if executable else None)
        self.cancel()
        async with self._gate:
            await self._stop_watch()
            self.executable = executable
            self.catalog = None
        if executable is None:
            self.host.discovery_finished(None)
            return None
        return await self.load()

    def _ensure_watch(self, executable: TestExecutable) -> None:
        if self._fs_observer is not None or self._closed:
            return

        target = executable.resolved_path
        watch_dir, recursive = _watch_root(target)
        observer = Observer()
        try:
            handler = ExecutableChangeHandler(target, asyncio.get_running_loop(), self._on_executable_event)
            observer.schedule(handler, str(watch_dir), recursive=recursive)
            observer.start()
        except Exception as e:
            log.error("Failed to watch test executable", path=str(target), error=str(e), exc_info=True)
            return

        self._fs_observer = observer
        self._watch_target = target
        if recursive:
            log.debug("Executable directory does not exist yet, watching ancestor", directory=str(watch_dir))
        log.info("Watching test executable", path=str(target), emoji_key="watch")

    async def _stop_watch(self) -> None:
        if self._reload_handle:
            self._reload_handle.cancel()
            self._reload_handle = None
        observer, self._fs_observer = self._fs_observer, None
        self._watch_target = None
        if observer is None:
            return
        if observer.is_alive():
            observer.stop()
            await asyncio.to_thread(observer.join)
        log.debug("Stopped watching test executable")

    def _on_executable_event(self, kind: str) -> None:
        executable = self.executable
        if self._closed or executable is None:
            return
        if kind != "deleted" and not executable.is_executable():
            log.debug("Ignoring change to a non-executable file", kind=kind)
            return
        log.debug("Test executable changed, scheduling reload", kind=kind, emoji_key="watch")

        if self._reload_handle:
            self._reload_handle.cancel()
        loop = asyncio.get_running_loop()
        self._reload_handle = loop.call_later(DEBOUNCE_DELAY, self._start_reload)

    def _start_reload(self) -> None:
        self._reload_handle = None
        task = asyncio.create_task(self.load())
        self._reload_tasks.add(task)
        task.add_done_callback(self._reload_tasks.discard)

    async def close(self) -> None:
        """Stop watching, cancel pending reloads and any in-flight run."""
        self._closed = True
        self.cancel()
        for task in list(self._reload_tasks):
            task.cancel()
        await asyncio.gather(*self._reload_tasks, return_exceptions=True)
        await self._stop_watch()

    async def __aenter__(self) -> "SessionCoordinator":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

# 🔼⚙️
