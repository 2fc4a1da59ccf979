"""Compare observed indentation with what the directive mandates."""

from __future__ import annotations

from tabdirective.heuristics.engine import IndentObservation
from tabdirective.models import EffectiveSettings

MIXED_MESSAGE = "This file contains mixed tabs and spaces"
SPACES_VS_TABS_MESSAGE = (
    "This file seems to be using spaces while the tabdirective mandates tabs"
)
TABS_VS_SPACES_MESSAGE = (
    "This file seems to be using tabs while the tabdirective mandates "
    "spaces of indentsize: {indent_size}"
)
INDENT_SIZE_MESSAGE = (
    "This file seems to be using indentsize: {guessed} while the "
    "tabdirective mandates: {indent_size}"
)


def advise(
    observation: IndentObservation, settings: EffectiveSettings
) -> str | None:
    """Return a user-facing warning, or None when the file conforms.

    Checks run in priority order and only the first hit is reported.
    """
    if observation.is_mixed:
        return MIXED_MESSAGE
    if observation.starts_with_space and settings.insert_tabs:
        return SPACES_VS_TABS_MESSAGE
    if observation.starts_with_tabs and not settings.insert_tabs:
        return TABS_VS_SPACES_MESSAGE.format(
            indent_size=settings.indent_size
        )
    if (
        observation.starts_with_space
        and observation.guessed_indent_size != settings.indent_size
    ):
        return INDENT_SIZE_MESSAGE.format(
            guessed=observation.guessed_indent_size,
            indent_size=settings.indent_size,
        )
    return None
