"""Shared test fixtures: fake watch service, recording sink, temp trees."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from tabdirective.config import Settings
from tabdirective.constants import IndentStyle
from tabdirective.directives.hierarchy import DirectoryHierarchy
from tabdirective.dispatch import SerialTaskQueue
from tabdirective.models import EffectiveSettings
from tabdirective.observability import (
    CallbackEventHandler,
    EventDispatcher,
    SettingsEvent,
)
from tabdirective.session import DocumentSession
from tabdirective.watch.fakes import FakeFileWatchService, RecordingSettingsSink


def write_directive(directory: Path, content: str) -> Path:
    """Create ``tab.directive`` in *directory* (and its parents)."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "tab.directive"
    path.write_text(content, encoding="utf-8")
    return path


def write_document(path: Path, content: str = "x = 1\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def baseline() -> EffectiveSettings:
    """Host settings at session start."""
    return EffectiveSettings(
        tab_size=4,
        indent_size=4,
        indent_style=IndentStyle.SMART,
        insert_tabs=True,
    )


@pytest.fixture
def sink() -> RecordingSettingsSink:
    return RecordingSettingsSink()


@pytest.fixture
def watch_service() -> FakeFileWatchService:
    return FakeFileWatchService()


@pytest.fixture
def tasks() -> SerialTaskQueue:
    return SerialTaskQueue()


@pytest.fixture
def events() -> list[SettingsEvent]:
    return []


@pytest.fixture
def dispatcher(events: list[SettingsEvent]) -> EventDispatcher:
    """Dispatcher that collects every event into ``events``."""
    d = EventDispatcher()
    d.register(CallbackEventHandler("collector", events.append))
    return d


@pytest.fixture
def make_session(
    tmp_path: Path,
    baseline: EffectiveSettings,
    sink: RecordingSettingsSink,
    watch_service: FakeFileWatchService,
    tasks: SerialTaskQueue,
    dispatcher: EventDispatcher,
) -> Iterator[Callable[[Path], DocumentSession]]:
    """Factory for sessions rooted at ``tmp_path`` using the fakes above."""
    sessions: list[DocumentSession] = []

    def _make(document: Path) -> DocumentSession:
        session = DocumentSession(
            document,
            walker=DirectoryHierarchy(tmp_path),
            initial=baseline,
            sink=sink,
            watch_service=watch_service,
            tasks=tasks,
            settings=Settings(),
            dispatcher=dispatcher,
        )
        sessions.append(session)
        return session

    yield _make
    for session in sessions:
        session.dispose()
