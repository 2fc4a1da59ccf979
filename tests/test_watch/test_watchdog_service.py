"""Tests for the watchdog-backed watch service."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from tabdirective.errors import WatchSetupError
from tabdirective.watch.service import (
    WatchdogFileWatchService,
    _FilenameHandler,
)


class _Recorder:
    def __init__(self) -> None:
        self.changes = 0
        self.deletes = 0

    def change(self) -> None:
        self.changes += 1

    def delete(self) -> None:
        self.deletes += 1


@pytest.fixture
def recorder() -> _Recorder:
    return _Recorder()


@pytest.fixture
def handler(recorder: _Recorder) -> _FilenameHandler:
    return _FilenameHandler("tab.directive", recorder.change, recorder.delete)


class TestFilenameHandler:
    def test_modified_and_created_are_changes(
        self, handler: _FilenameHandler, recorder: _Recorder
    ) -> None:
        handler.dispatch(FileModifiedEvent("/w/tab.directive"))
        handler.dispatch(FileCreatedEvent("/w/tab.directive"))
        assert recorder.changes == 2
        assert recorder.deletes == 0

    def test_deleted(
        self, handler: _FilenameHandler, recorder: _Recorder
    ) -> None:
        handler.dispatch(FileDeletedEvent("/w/tab.directive"))
        assert recorder.deletes == 1

    def test_other_files_ignored(
        self, handler: _FilenameHandler, recorder: _Recorder
    ) -> None:
        handler.dispatch(FileModifiedEvent("/w/main.c"))
        handler.dispatch(FileDeletedEvent("/w/tab.directive.bak"))
        handler.dispatch(DirModifiedEvent("/w"))
        assert (recorder.changes, recorder.deletes) == (0, 0)

    def test_rename_over_directive_is_change(
        self, handler: _FilenameHandler, recorder: _Recorder
    ) -> None:
        handler.dispatch(FileMovedEvent("/w/.tab.tmp", "/w/tab.directive"))
        assert recorder.changes == 1

    def test_rename_away_is_delete(
        self, handler: _FilenameHandler, recorder: _Recorder
    ) -> None:
        handler.dispatch(FileMovedEvent("/w/tab.directive", "/w/old"))
        assert recorder.deletes == 1


class TestWatchdogFileWatchService:
    def test_missing_directory_fails_fast(self, tmp_path: Path) -> None:
        service = WatchdogFileWatchService()
        with pytest.raises(WatchSetupError) as exc_info:
            service.watch(
                tmp_path / "absent", "tab.directive", lambda: None, lambda: None
            )
        assert exc_info.value.directory == tmp_path / "absent"

    def test_change_is_delivered(self, tmp_path: Path) -> None:
        directive = tmp_path / "tab.directive"
        directive.write_text("tabsize: 2")
        changed = threading.Event()

        handle = WatchdogFileWatchService().watch(
            tmp_path, "tab.directive", changed.set, lambda: None
        )
        try:
            assert handle.directory == tmp_path
            directive.write_text("tabsize: 4")
            assert changed.wait(timeout=5.0)
        finally:
            handle.close()

    def test_close_is_idempotent(self, tmp_path: Path) -> None:
        handle = WatchdogFileWatchService().watch(
            tmp_path, "tab.directive", lambda: None, lambda: None
        )
        handle.close()
        handle.close()
