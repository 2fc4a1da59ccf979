"""Merge parsed directives into a document's effective settings.

Only keys present in the directive set are touched; each one that parses
is written to the working copy and pushed to the host through a
:class:`SettingsSink`. A malformed value skips that key alone.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Protocol

from tabdirective.constants import MAX_DIRECTIVE_SIZE, DirectiveKey, IndentStyle
from tabdirective.errors import MalformedValueError
from tabdirective.models import EffectiveSettings
from tabdirective.observability.dispatcher import EventDispatcher
from tabdirective.observability.events import SettingsEvent

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


class SettingsSink(Protocol):
    """Host's live editor configuration, updated one field at a time."""

    def set_indent_style(self, style: IndentStyle) -> None: ...
    def set_tab_size(self, size: int) -> None: ...
    def set_indent_size(self, size: int) -> None: ...
    def set_insert_tabs(self, insert_tabs: bool) -> None: ...


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of applying one directive set over previous settings."""

    settings: EffectiveSettings
    changed: bool
    skipped: tuple[MalformedValueError, ...] = ()


def parse_indent_style(value: str) -> IndentStyle:
    """``smart`` and ``none`` are explicit; anything else means block."""
    lowered = value.lower()
    if lowered == IndentStyle.SMART:
        return IndentStyle.SMART
    if lowered == IndentStyle.NONE:
        return IndentStyle.NONE
    return IndentStyle.BLOCK


def parse_positive_int(key: str, value: str) -> int:
    # Length check first; int() refuses very long digit strings
    if (
        not _DIGITS.fullmatch(value)
        or len(value.lstrip("0")) > len(str(MAX_DIRECTIVE_SIZE))
        or not 0 < int(value) <= MAX_DIRECTIVE_SIZE
    ):
        raise MalformedValueError(
            key, value, f"a positive integer up to {MAX_DIRECTIVE_SIZE}"
        )
    return int(value)


def parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise MalformedValueError(key, value, "true or false")


def apply_directives(
    directives: Mapping[str, str],
    previous: EffectiveSettings,
    sink: SettingsSink,
) -> ReconcileResult:
    """Apply recognized keys from *directives* on top of *previous*.

    ``changed`` reports whether tab size, indent size or insert-tabs
    ended up different from *previous*.
    """
    working = previous
    skipped: list[MalformedValueError] = []
    for key in DirectiveKey:
        raw = directives.get(key)
        if raw is None:
            continue
        try:
            working = _apply_one(key, raw, working, sink)
        except MalformedValueError as exc:
            logger.warning(
                "event=directive_value_malformed key=%s value=%s",
                exc.key,
                exc.value,
            )
            skipped.append(exc)
    return ReconcileResult(
        settings=working,
        changed=working.differs_from(previous),
        skipped=tuple(skipped),
    )


def _apply_one(
    key: DirectiveKey,
    raw: str,
    working: EffectiveSettings,
    sink: SettingsSink,
) -> EffectiveSettings:
    if key == DirectiveKey.INDENT_STYLE:
        style = parse_indent_style(raw)
        sink.set_indent_style(style)
        return replace(working, indent_style=style)
    if key == DirectiveKey.TAB_SIZE:
        size = parse_positive_int(key, raw)
        sink.set_tab_size(size)
        return replace(working, tab_size=size)
    if key == DirectiveKey.INDENT_SIZE:
        size = parse_positive_int(key, raw)
        sink.set_indent_size(size)
        return replace(working, indent_size=size)
    insert_tabs = parse_bool(key, raw)
    sink.set_insert_tabs(insert_tabs)
    return replace(working, insert_tabs=insert_tabs)


class SettingsReconciler:
    """Sole writer of one document's :class:`EffectiveSettings`.

    The host's settings at session start are the baseline, so the first
    reconcile only notifies if the directive actually moves something.
    Must be driven from the document's owning thread.
    """

    def __init__(
        self,
        document: Path,
        initial: EffectiveSettings,
        sink: SettingsSink,
        dispatcher: EventDispatcher,
    ) -> None:
        self._document = document
        self._current = initial
        self._sink = sink
        self._dispatcher = dispatcher
        self._has_directive = False

    @property
    def current(self) -> EffectiveSettings:
        return self._current

    @property
    def has_directive(self) -> bool:
        """True once any directive set has been reconciled."""
        return self._has_directive

    def reconcile(
        self,
        directives: Mapping[str, str],
        directive_path: Path | None = None,
    ) -> ReconcileResult:
        result = apply_directives(directives, self._current, self._sink)
        self._current = result.settings
        self._has_directive = True
        if result.changed:
            logger.info(
                "event=settings_changed document=%s directive=%s",
                self._document,
                directive_path,
            )
            self._dispatcher.emit(
                SettingsEvent(
                    type="settings_changed",
                    document=self._document,
                    settings=result.settings,
                    directive_path=directive_path,
                )
            )
        return result


class InMemorySettingsSink:
    """SettingsSink that keeps the last value pushed for each field.

    Stands in for an editor's live configuration when running outside
    one (CLI, scans).
    """

    def __init__(self) -> None:
        self.values: dict[str, object] = {}

    def set_indent_style(self, style: IndentStyle) -> None:
        self.values["indent_style"] = style

    def set_tab_size(self, size: int) -> None:
        self.values["tab_size"] = size

    def set_indent_size(self, size: int) -> None:
        self.values["indent_size"] = size

    def set_insert_tabs(self, insert_tabs: bool) -> None:
        self.values["insert_tabs"] = insert_tabs
