"""Directive file watching."""

from tabdirective.watch.engine import DirectiveWatcher, RefreshResult, WatchState
from tabdirective.watch.service import (
    FileWatchService,
    WatchdogFileWatchService,
    WatchHandle,
)

__all__ = [
    "DirectiveWatcher",
    "FileWatchService",
    "RefreshResult",
    "WatchHandle",
    "WatchState",
    "WatchdogFileWatchService",
]
