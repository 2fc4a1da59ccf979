"""Per-document facade the host talks to.

One session per open document: heuristics, a directive watcher and the
reconciler that owns the document's effective settings. The host calls
:meth:`DocumentSession.refresh` on load, save and focus; the watcher
keeps things current in between.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from tabdirective.advisor import advise
from tabdirective.config import Settings
from tabdirective.directives.hierarchy import HierarchyWalker
from tabdirective.dispatch import TaskQueue
from tabdirective.heuristics.engine import IndentHeuristics, IndentObservation
from tabdirective.heuristics.snapshot import SnapshotSource
from tabdirective.models import EffectiveSettings
from tabdirective.observability import (
    CallbackEventHandler,
    EventDispatcher,
    SettingsEvent,
)
from tabdirective.reconciler import SettingsReconciler, SettingsSink
from tabdirective.watch.engine import DirectiveWatcher, RefreshResult
from tabdirective.watch.service import FileWatchService

logger = logging.getLogger(__name__)


class DocumentSession:
    """Owns the heuristics, watcher and reconciler for one document."""

    def __init__(
        self,
        document: Path,
        *,
        walker: HierarchyWalker,
        initial: EffectiveSettings,
        sink: SettingsSink,
        watch_service: FileWatchService,
        tasks: TaskQueue,
        settings: Settings | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        cfg = settings or Settings()
        self._document = Path(document)
        self._dispatcher = dispatcher or EventDispatcher()
        self._heuristics = IndentHeuristics(cfg)
        self._reconciler = SettingsReconciler(
            self._document, initial, sink, self._dispatcher
        )
        self._watcher = DirectiveWatcher(
            self._document,
            walker,
            watch_service,
            self._reconciler,
            tasks,
            self._dispatcher,
            filename=cfg.directive_filename,
            max_depth=cfg.max_hierarchy_depth,
        )
        self._subscriptions = 0

    @property
    def document(self) -> Path:
        return self._document

    @property
    def settings(self) -> EffectiveSettings:
        return self._reconciler.current

    @property
    def watcher(self) -> DirectiveWatcher:
        return self._watcher

    def analyze(self, snapshot: SnapshotSource) -> IndentObservation:
        return self._heuristics.analyze(snapshot)

    def check(self, snapshot: SnapshotSource) -> str | None:
        """Analyze *snapshot* and compare it with the effective settings.

        Without an applied directive nothing is mandated, so no advice.
        """
        if not self._reconciler.has_directive:
            return None
        return advise(self.analyze(snapshot), self.settings)

    def refresh(self) -> RefreshResult:
        return self._watcher.refresh()

    def subscribe(self, callback: Callable[[SettingsEvent], None]) -> str:
        """Register *callback* for settings events; returns its handler name."""
        self._subscriptions += 1
        name = f"subscriber-{self._subscriptions}"
        self._dispatcher.register(CallbackEventHandler(name, callback))
        return name

    def unsubscribe(self, name: str) -> None:
        self._dispatcher.unregister(name)

    def dispose(self) -> None:
        """Stop the watch before the host releases the document."""
        self._watcher.dispose()
        logger.debug("event=session_disposed document=%s", self._document)

    def __enter__(self) -> DocumentSession:
        return self

    def __exit__(self, *exc: object) -> None:
        self.dispose()
