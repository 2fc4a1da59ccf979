"""Observability layer -- event dispatcher + pluggable handlers."""

from __future__ import annotations

from tabdirective.observability.dispatcher import EventDispatcher
from tabdirective.observability.events import SettingsEvent, SettingsEventType
from tabdirective.observability.handlers.callback import CallbackEventHandler
from tabdirective.observability.handlers.console import ConsoleEventHandler

__all__ = [
    "CallbackEventHandler",
    "ConsoleEventHandler",
    "EventDispatcher",
    "SettingsEvent",
    "SettingsEventType",
    "initialize_dispatcher",
]


def initialize_dispatcher(*, console: bool = True) -> EventDispatcher:
    """Create a dispatcher, optionally logging every event to the console."""
    dispatcher = EventDispatcher()
    if console:
        dispatcher.register(ConsoleEventHandler())
    return dispatcher
