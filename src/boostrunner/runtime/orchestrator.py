# src/boostrunner/runtime/orchestrator.py

"""
High-level coordinator for the boostrunner watch process.
Loads configuration, keeps the catalog fresh and reacts to config edits.
"""

import asyncio
import contextlib
from pathlib import Path

import structlog
from attrs import evolve
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from boostrunner.config import BoostRunnerConfig, load_config
from boostrunner.exceptions import ConfigurationError
from boostrunner.telemetry import StructLogger
from boostrunner.testing.executable import TestExecutable
from boostrunner.testing.protocols import SessionObserver

from .coordinator import SessionCoordinator

log: StructLogger = structlog.get_logger("runtime.orchestrator")
# Editors save in several steps; wait for the file to settle before reloading.
CONFIG_SETTLE_DELAY = 0.5


class WatchOrchestrator:
    """Runs one SessionCoordinator until shutdown, rebuilding it on config change."""

    def __init__(
        self,
        config_path: Path,
        shutdown_event: asyncio.Event,
        observer: SessionObserver | None = None,
        executable_override: Path | None = None,
    ):
        self.config_path = config_path
        self.shutdown_event = shutdown_event
        self.observer = observer
        self.executable_override = executable_override
        self.config: BoostRunnerConfig | None = None
        self.coordinator: SessionCoordinator | None = None
        self.reload_queue: asyncio.Queue[Path] = asyncio.Queue()
        self.config_observer: BaseObserver | None = None

    async def run(self) -> None:
        """Main execution method: setup, run, and cleanup."""
        log.info("Orchestrator run sequence starting.")

        try:
            try:
                self.config = await asyncio.to_thread(load_config, self.config_path)
            except ConfigurationError as e:
                log.critical("Failed to load or validate config", error=str(e))
                return

            self.coordinator = SessionCoordinator(self.build_executable(self.config), self.observer)
            await self.coordinator.load()

            self.setup_config_watcher()
            if self.config_observer:
                try:
                    self.config_observer.start()
                except Exception as e:
                    log.critical("Failed to start configuration file watcher", error=str(e), exc_info=True)
                    self.config_observer = None

            await self._process_reloads()

        except asyncio.CancelledError:
            log.warning("Orchestrator task was cancelled.")
        finally:
            log.info("Orchestrator entering cleanup phase.")
            if self.coordinator:
                await self.coordinator.close()

            if self.config_observer and self.config_observer.is_alive():
                self.config_observer.stop()
                self.config_observer.join()

            log.info("Orchestrator cleanup complete.")

    def build_executable(self, config: BoostRunnerConfig) -> TestExecutable | None:
        executable_config = config.executable
        if self.executable_override is not None:
            if executable_config is None:
                return TestExecutable(self.executable_override, Path.cwd())
            executable_config = evolve(executable_config, path=self.executable_override)
        return executable_config.to_executable() if executable_config else None

    async def _process_reloads(self) -> None:
        while not self.shutdown_event.is_set():
            get_task = asyncio.create_task(self.reload_queue.get())
            shutdown_task = asyncio.create_task(self.shutdown_event.wait())
            try:
                done, _ = await asyncio.wait({get_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                get_task.cancel()
                shutdown_task.cancel()

            if shutdown_task in done:
                break

            await asyncio.sleep(CONFIG_SETTLE_DELAY)
            # Collapse a burst of modifications into one reload.
            while not self.reload_queue.empty():
                self.reload_queue.get_nowait()
            await self.reload_config()

    def setup_config_watcher(self) -> None:
        loop = asyncio.get_running_loop()
        config_path_str = str(self.config_path.resolve())
        queue = self.reload_queue

        class ConfigChangeHandler(FileSystemEventHandler):
            def on_modified(self, event: FileSystemEvent):
                if str(Path(str(event.src_path)).resolve()) == config_path_str:
                    log.info("Configuration file modified, queueing reload event.")
                    with contextlib.suppress(RuntimeError):
                        loop.call_soon_threadsafe(queue.put_nowait, Path(config_path_str))

            on_created = on_modified

        try:
            self.config_observer = Observer()
            watch_dir = str(self.config_path.resolve().parent)
            self.config_observer.schedule(ConfigChangeHandler(), watch_dir, recursive=False)
            log.info("Configuration file watcher scheduled", path=watch_dir, emoji_key="watch")
        except Exception as e:
            log.error("Failed to set up configuration file watcher", error=str(e), exc_info=True)
            self.config_observer = None

    async def reload_config(self) -> bool:
        log.info("Reloading configuration...")
        try:
            new_config = await asyncio.to_thread(load_config, self.config_path)
        except ConfigurationError as e:
            log.error("Failed to reload configuration, keeping the previous one", error=str(e))
            return False

        if new_config == self.config:
            log.debug("Configuration unchanged, nothing to reload.")
            return True

        self.config = new_config
        if self.coordinator:
            await self.coordinator.reconfigure(self.build_executable(new_config))
        log.info("Configuration reloaded.")
        return True

# 🔼⚙️
