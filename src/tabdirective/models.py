"""Frozen, identity-less settings types shared across layers."""

from __future__ import annotations

from dataclasses import dataclass

from tabdirective.constants import IndentStyle


@dataclass(frozen=True)
class EffectiveSettings:
    """Indentation settings currently applied to one document.

    Seeded from the host's live configuration; afterwards only directive
    content changes a field, and only the fields a directive names.
    """

    tab_size: int
    indent_size: int
    indent_style: IndentStyle
    insert_tabs: bool

    def differs_from(self, other: EffectiveSettings) -> bool:
        """Compare the fields that affect whitespace; indent style is ignored."""
        return (
            self.tab_size != other.tab_size
            or self.indent_size != other.indent_size
            or self.insert_tabs != other.insert_tabs
        )
