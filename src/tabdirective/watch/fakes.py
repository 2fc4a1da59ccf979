"""In-memory fakes for the watch service and settings sink.

No threads and no filesystem notifications; tests trigger events by hand.
"""

# pyright: reportUnusedFunction=false

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tabdirective.constants import IndentStyle
from tabdirective.errors import WatchSetupError
from tabdirective.watch.service import WatchCallback


@dataclass
class FakeWatchHandle:
    """Handle returned by :class:`FakeFileWatchService`."""

    directory: Path
    filename: str
    on_change: WatchCallback
    on_delete: WatchCallback
    closed: bool = False
    close_calls: int = 0

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeFileWatchService:
    """Records watches; ``trigger_*`` plays the notification thread."""

    def __init__(self) -> None:
        self.handles: list[FakeWatchHandle] = []
        self.failing: set[Path] = set()

    def watch(
        self,
        directory: Path,
        filename: str,
        on_change: WatchCallback,
        on_delete: WatchCallback,
    ) -> FakeWatchHandle:
        directory = Path(directory)
        if directory in self.failing:
            raise WatchSetupError(directory, "permission denied")
        handle = FakeWatchHandle(directory, filename, on_change, on_delete)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> list[FakeWatchHandle]:
        return [h for h in self.handles if not h.closed]

    def trigger_change(self, times: int = 1) -> None:
        for handle in self.active:
            for _ in range(times):
                handle.on_change()

    def trigger_delete(self) -> None:
        for handle in self.active:
            handle.on_delete()


@dataclass
class RecordingSettingsSink:
    """SettingsSink that records every single-field update in order."""

    calls: list[tuple[str, Any]] = field(
        default_factory=lambda: list[tuple[str, Any]]()
    )

    def set_indent_style(self, style: IndentStyle) -> None:
        self.calls.append(("indent_style", style))

    def set_tab_size(self, size: int) -> None:
        self.calls.append(("tab_size", size))

    def set_indent_size(self, size: int) -> None:
        self.calls.append(("indent_size", size))

    def set_insert_tabs(self, insert_tabs: bool) -> None:
        self.calls.append(("insert_tabs", insert_tabs))

    def fields(self) -> list[str]:
        return [name for name, _ in self.calls]
