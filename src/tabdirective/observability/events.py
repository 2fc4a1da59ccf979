"""Typed events raised when a document's directive state moves."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from tabdirective.models import EffectiveSettings

SettingsEventType = Literal[
    "settings_changed",
    "directive_error",
    "directive_invalidated",
]


@dataclass(frozen=True)
class SettingsEvent:
    """Immutable notification about one document's effective settings."""

    type: SettingsEventType
    document: Path
    settings: EffectiveSettings | None = None
    directive_path: Path | None = None
    message: str = ""
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )
