"""Console event handler -- key=value log output."""

from __future__ import annotations

import logging

from tabdirective.observability.events import SettingsEvent

logger = logging.getLogger(__name__)


class ConsoleEventHandler:
    """Logs settings events as key=value messages."""

    @property
    def name(self) -> str:
        return "console"

    def handle(self, event: SettingsEvent) -> None:
        parts = [
            f"settings_event={event.type}",
            f"document={event.document}",
        ]
        if event.directive_path is not None:
            parts.append(f"directive={event.directive_path}")
        if event.settings is not None:
            s = event.settings
            parts.extend([
                f"tab_size={s.tab_size}",
                f"indent_size={s.indent_size}",
                f"indent_style={s.indent_style.value}",
                f"insert_tabs={s.insert_tabs}",
            ])
        if event.message:
            parts.append(f"message={event.message}")
        level = logging.WARNING if event.type == "directive_error" else logging.INFO
        logger.log(level, " ".join(parts))
