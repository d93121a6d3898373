"""Watching configuration files and reloading them when they change."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .loader import ConfigLoadError, Loader
from .settings import CONFIG_NAME, Config, KeyNames, PlatformResolver, get_platform_resolver

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.5


@dataclass
class WatcherConfig:
    """Settings for a ConfigWatcher; ``debounce`` is in seconds, 0 means the default."""

    config_path: str | os.PathLike
    on_change: Callable[[Config], None] | None = None
    debounce: float = 0.0
    keys: KeyNames | None = None
    resolver: PlatformResolver | None = None


def _normalise(path: str | bytes | os.PathLike) -> str:
    return os.path.realpath(os.fsdecode(path))


class _EventHandler(FileSystemEventHandler):
    def __init__(self, watcher: ConfigWatcher) -> None:
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._watcher._handle_event(event)


class ConfigWatcher:
    """Reloads the configuration after its files are written or created."""

    def __init__(self, config: WatcherConfig) -> None:
        resolver = config.resolver or get_platform_resolver()
        self.loader = Loader(config.config_path, config.keys, resolver)
        self.on_change = config.on_change
        self.debounce = config.debounce or DEFAULT_DEBOUNCE
        base = os.fspath(config.config_path)
        self.config_paths = [
            os.path.join(base, f"{CONFIG_NAME}.yml"),
            os.path.join(base, resolver.platform_config_file()),
        ]
        self._watched = {_normalise(path) for path in self.config_paths}
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._stopped = False
        self._started = False
        self._observer = Observer()

        directory = _normalise(base)
        if os.path.isdir(directory):
            self._observer.schedule(_EventHandler(self), directory, recursive=False)
            for path in self.config_paths:
                logger.info("Watching config file: %s", path)
        else:
            logger.warning("Failed to watch config directory %s: not a directory", base)

    def start(self) -> None:
        """Begin watching in the background."""
        with self._lock:
            if self._started:
                raise RuntimeError("config watcher already started")
            self._started = True
        try:
            self._observer.start()
        except OSError as exc:
            logger.warning("Failed to start config watcher: %s", exc)

    def stop(self) -> None:
        """Stop watching and cancel any pending reload."""
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if self._observer.is_alive():
            logger.info("Config watcher stopping...")
            self._observer.stop()
            self._observer.join()

    def __enter__(self) -> ConfigWatcher:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()

    def _handle_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        kind = event.event_type
        if kind == "moved":
            dest = getattr(event, "dest_path", "")
            if dest and _normalise(dest) in self._watched:
                logger.info("Config file created: %s", os.fsdecode(dest))
                self._schedule_reload()
            elif _normalise(event.src_path) in self._watched:
                logger.info("Config file renamed: %s", os.fsdecode(event.src_path))
            return

        if _normalise(event.src_path) not in self._watched:
            return
        name = os.fsdecode(event.src_path)
        if kind == "modified":
            logger.info("Config file modified: %s", name)
        elif kind == "created":
            logger.info("Config file created: %s", name)
        elif kind == "deleted":
            logger.info("Config file removed: %s", name)
            return
        else:
            return
        self._schedule_reload()

    def _schedule_reload(self) -> None:
        with self._lock:
            if self._stopped:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self._reload)
            self._timer.daemon = True
            self._timer.start()

    def _reload(self) -> None:
        logger.info("Reloading configuration...")
        try:
            cfg = self.loader.load()
        except ConfigLoadError as exc:
            logger.error("Failed to reload configuration: %s", exc)
            return
        if self.on_change is not None:
            self.on_change(cfg)
        logger.info("Configuration reloaded successfully")