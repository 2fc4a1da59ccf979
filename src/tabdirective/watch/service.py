"""Directory watch service backed by ``watchdog``.

One observer per watch keeps the lifetime simple: closing a handle stops
its observer thread, after which no further callbacks are delivered.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from tabdirective.constants import WATCH_JOIN_TIMEOUT_SECONDS
from tabdirective.errors import WatchSetupError

logger = logging.getLogger(__name__)

type WatchCallback = Callable[[], None]


class WatchHandle(Protocol):
    """An active watch; ``close`` must be idempotent."""

    @property
    def directory(self) -> Path: ...

    def close(self) -> None: ...


class FileWatchService(Protocol):
    """Delivers change/delete notifications for one file in a directory.

    Callbacks run on a notification thread, never the caller's. Setup
    failures raise WatchSetupError immediately.
    """

    def watch(
        self,
        directory: Path,
        filename: str,
        on_change: WatchCallback,
        on_delete: WatchCallback,
    ) -> WatchHandle: ...


class _FilenameHandler(FileSystemEventHandler):
    """Maps raw directory events for *filename* onto change/delete."""

    def __init__(
        self,
        filename: str,
        on_change: WatchCallback,
        on_delete: WatchCallback,
    ) -> None:
        super().__init__()
        self._filename = filename
        self._on_change = on_change
        self._on_delete = on_delete

    def _matches(self, path: str | bytes) -> bool:
        return Path(os.fsdecode(path)).name == self._filename

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self._on_change()

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self._on_change()

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self._matches(event.src_path):
            self._on_delete()

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        # Editors often save by writing a temp file and renaming it over
        if self._matches(event.dest_path):
            self._on_change()
        elif self._matches(event.src_path):
            self._on_delete()


class _ObserverHandle:
    def __init__(
        self,
        observer: BaseObserver,
        directory: Path,
        join_timeout: float,
    ) -> None:
        self._observer = observer
        self._directory = directory
        self._join_timeout = join_timeout
        self._closed = False
        self._lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._observer.stop()
        # Joining from the observer's own thread would deadlock
        if threading.current_thread() is not self._observer:
            self._observer.join(timeout=self._join_timeout)
        logger.debug("event=watch_closed directory=%s", self._directory)


class WatchdogFileWatchService:
    """FileWatchService over the platform's native watch API."""

    def __init__(
        self, join_timeout: float = WATCH_JOIN_TIMEOUT_SECONDS
    ) -> None:
        self._join_timeout = join_timeout

    def watch(
        self,
        directory: Path,
        filename: str,
        on_change: WatchCallback,
        on_delete: WatchCallback,
    ) -> WatchHandle:
        directory = Path(directory)
        if not directory.is_dir():
            raise WatchSetupError(directory, "not a directory")

        observer = Observer()
        handler = _FilenameHandler(filename, on_change, on_delete)
        try:
            observer.schedule(handler, str(directory), recursive=False)
            observer.start()
        except OSError as exc:
            raise WatchSetupError(directory, str(exc)) from exc
        logger.debug(
            "event=watch_started directory=%s filename=%s",
            directory,
            filename,
        )
        return _ObserverHandle(observer, directory, self._join_timeout)
