"""Adapter that turns a plain callable into a named event handler."""

from __future__ import annotations

from collections.abc import Callable

from tabdirective.observability.events import SettingsEvent


class CallbackEventHandler:
    """Forwards every event to *callback*; registered under *name*."""

    def __init__(
        self, name: str, callback: Callable[[SettingsEvent], None]
    ) -> None:
        self._name = name
        self._callback = callback

    @property
    def name(self) -> str:
        return self._name

    def handle(self, event: SettingsEvent) -> None:
        self._callback(event)
