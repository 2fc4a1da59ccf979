"""Keep one document's effective settings in step with its directive file.

Two states: Unresolved (no known directive path) and Watching (a path is
resolved and its directory is watched). ``refresh`` resolves lazily,
installs the watch and reconciles. Watch callbacks arrive on a
notification thread; they only update :class:`WatchState` under the lock
and post follow-up work onto the session's :class:`TaskQueue`, so the
reconciler is only ever driven from the owning thread.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from pathlib import Path

from tabdirective.constants import (
    DIRECTIVE_FILENAME,
    MAX_HIERARCHY_DEPTH,
    RefreshOutcome,
)
from tabdirective.directives.hierarchy import HierarchyWalker
from tabdirective.directives.locator import resolve_directive
from tabdirective.directives.parser import read_directives
from tabdirective.dispatch import TaskQueue
from tabdirective.errors import (
    DirectiveError,
    DuplicateKeyError,
    MalformedValueError,
    WatchSetupError,
)
from tabdirective.models import EffectiveSettings
from tabdirective.observability.dispatcher import EventDispatcher
from tabdirective.observability.events import SettingsEvent
from tabdirective.reconciler import SettingsReconciler
from tabdirective.watch.service import FileWatchService, WatchHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchState:
    """Snapshot of what the watcher currently knows."""

    resolved_path: Path | None = None
    is_watching: bool = False


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of one resolve/parse/reconcile cycle."""

    outcome: RefreshOutcome
    settings: EffectiveSettings
    directive_path: Path | None = None
    changed: bool = False
    error: DirectiveError | OSError | None = None
    skipped: tuple[MalformedValueError, ...] = ()


class DirectiveWatcher:
    """Resolves, watches and reloads the directive file for one document."""

    def __init__(
        self,
        document: Path,
        walker: HierarchyWalker,
        watch_service: FileWatchService,
        reconciler: SettingsReconciler,
        tasks: TaskQueue,
        dispatcher: EventDispatcher,
        *,
        filename: str = DIRECTIVE_FILENAME,
        max_depth: int = MAX_HIERARCHY_DEPTH,
    ) -> None:
        self._document = Path(document)
        self._walker = walker
        self._service = watch_service
        self._reconciler = reconciler
        self._tasks = tasks
        self._dispatcher = dispatcher
        self._filename = filename
        self._max_depth = max_depth

        # Guarded by _lock; the watch thread reads and writes these
        self._lock = threading.Lock()
        self._state = WatchState()
        self._handle: WatchHandle | None = None
        self._generation = 0
        self._reload_pending = False
        self._disposed = False

        self._last_result: RefreshResult | None = None

    @property
    def state(self) -> WatchState:
        with self._lock:
            return self._state

    @property
    def disposed(self) -> bool:
        with self._lock:
            return self._disposed

    @property
    def last_result(self) -> RefreshResult | None:
        """Result of the most recent refresh or watch-triggered reload."""
        return self._last_result

    # ── Owning thread ────────────────────────────────────

    def refresh(self) -> RefreshResult:
        """Resolve if needed, make sure the watch is installed, reconcile."""
        with self._lock:
            disposed = self._disposed
            path = self._state.resolved_path
        if disposed:
            logger.debug(
                "event=refresh_after_dispose document=%s", self._document
            )
            return self._finish(RefreshOutcome.NOT_FOUND)

        if path is None:
            path = resolve_directive(
                self._document,
                self._walker,
                filename=self._filename,
                max_depth=self._max_depth,
            )
            if path is None:
                return self._finish(RefreshOutcome.NOT_FOUND)

        try:
            self._ensure_watch(path)
        except WatchSetupError as exc:
            logger.warning(
                "event=watch_setup_failed document=%s directory=%s "
                "reason=%s",
                self._document,
                exc.directory,
                exc.reason,
            )
            with self._lock:
                self._state = WatchState()
            self._emit_error(path, exc)
            return self._finish(
                RefreshOutcome.WATCH_FAILED, path=path, error=exc
            )

        return self._load(path)

    def dispose(self) -> None:
        """Stop watching. Safe to call repeatedly and from any state."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            handle = self._handle
            self._handle = None
            self._state = WatchState()
        if handle is not None:
            handle.close()
        logger.debug("event=watcher_disposed document=%s", self._document)

    def _ensure_watch(self, path: Path) -> None:
        directory = path.parent
        with self._lock:
            current = self._handle
            if current is not None and current.directory == directory:
                self._state = replace(self._state, resolved_path=path)
                return
            self._generation += 1
            generation = self._generation

        handle = self._service.watch(
            directory,
            path.name,
            lambda: self._on_changed(generation),
            lambda: self._on_deleted(generation),
        )

        with self._lock:
            stale = self._handle
            if self._disposed:
                stale, handle = handle, None
            else:
                self._handle = handle
                self._state = WatchState(resolved_path=path, is_watching=True)
        if stale is not None:
            stale.close()
        if handle is not None:
            logger.info(
                "event=watch_installed document=%s directive=%s",
                self._document,
                path,
            )

    def _load(self, path: Path) -> RefreshResult:
        try:
            directives = read_directives(path)
        except DuplicateKeyError as exc:
            logger.warning(
                "event=directive_parse_failed path=%s key=%s",
                path,
                exc.key,
            )
            self._emit_error(path, exc)
            return self._finish(
                RefreshOutcome.PARSE_FAILED, path=path, error=exc
            )
        except FileNotFoundError as exc:
            # Gone between locate and read; resolve again next time
            logger.warning("event=directive_vanished path=%s", path)
            self._invalidate_owned()
            return self._finish(
                RefreshOutcome.IO_FAILED, path=path, error=exc
            )
        except OSError as exc:
            logger.warning(
                "event=directive_read_failed path=%s error=%s", path, exc
            )
            return self._finish(
                RefreshOutcome.IO_FAILED, path=path, error=exc
            )

        result = self._reconciler.reconcile(directives, path)
        return self._finish(
            RefreshOutcome.APPLIED if result.changed else RefreshOutcome.UNCHANGED,
            path=path,
            changed=result.changed,
            skipped=result.skipped,
        )

    def _reload(self) -> None:
        with self._lock:
            self._reload_pending = False
            if self._disposed:
                return
            path = self._state.resolved_path
        if path is None:
            return
        logger.debug("event=directive_reload path=%s", path)
        self._load(path)

    def _invalidate_owned(self) -> None:
        with self._lock:
            handle = self._handle
            self._handle = None
            self._state = WatchState()
            self._generation += 1
        if handle is not None:
            handle.close()

    def _announce_invalidated(self, path: Path | None) -> None:
        if self.disposed:
            return
        self._dispatcher.emit(
            SettingsEvent(
                type="directive_invalidated",
                document=self._document,
                settings=self._reconciler.current,
                directive_path=path,
            )
        )

    def _emit_error(self, path: Path, error: Exception) -> None:
        self._dispatcher.emit(
            SettingsEvent(
                type="directive_error",
                document=self._document,
                settings=self._reconciler.current,
                directive_path=path,
                message=str(error),
            )
        )

    def _finish(
        self,
        outcome: RefreshOutcome,
        *,
        path: Path | None = None,
        changed: bool = False,
        error: DirectiveError | OSError | None = None,
        skipped: tuple[MalformedValueError, ...] = (),
    ) -> RefreshResult:
        result = RefreshResult(
            outcome=outcome,
            settings=self._reconciler.current,
            directive_path=path,
            changed=changed,
            error=error,
            skipped=skipped,
        )
        self._last_result = result
        return result

    # ── Notification thread ──────────────────────────────

    def _on_changed(self, generation: int) -> None:
        with self._lock:
            if (
                self._disposed
                or generation != self._generation
                or self._reload_pending
            ):
                return
            self._reload_pending = True
        self._tasks.post(self._reload)

    def _on_deleted(self, generation: int) -> None:
        with self._lock:
            if self._disposed or generation != self._generation:
                return
            path = self._state.resolved_path
            handle = self._handle
            self._handle = None
            self._state = WatchState()
            self._generation += 1
        logger.info(
            "event=directive_deleted document=%s path=%s",
            self._document,
            path,
        )
        if handle is not None:
            handle.close()
        self._tasks.post(lambda: self._announce_invalidated(path))
