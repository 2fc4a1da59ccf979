"""Pluggable settings-event handlers."""

from __future__ import annotations

from typing import Protocol

from tabdirective.observability.events import SettingsEvent


class EventHandler(Protocol):
    """Settings-event handler -- implement for each consumer."""

    @property
    def name(self) -> str: ...

    def handle(self, event: SettingsEvent) -> None: ...
