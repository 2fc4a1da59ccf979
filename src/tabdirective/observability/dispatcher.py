"""Fan-out dispatcher for settings events."""

from __future__ import annotations

import logging

from tabdirective.observability.events import SettingsEvent
from tabdirective.observability.handlers import EventHandler

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Fan-out dispatcher -- emits events to all registered handlers.

    Best-effort delivery: handler errors are logged, never raised.
    """

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def register(self, handler: EventHandler) -> None:
        """Register a handler. Duplicates (by name) are ignored."""
        if not any(h.name == handler.name for h in self._handlers):
            self._handlers.append(handler)

    def unregister(self, name: str) -> None:
        self._handlers = [h for h in self._handlers if h.name != name]

    def emit(self, event: SettingsEvent) -> None:
        """Best-effort fan-out to all registered handlers."""
        for handler in self._handlers:
            try:
                handler.handle(event)
            except Exception:
                logger.warning(
                    "event=settings_handler_error handler=%s type=%s",
                    handler.name,
                    event.type,
                    exc_info=True,
                )

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
