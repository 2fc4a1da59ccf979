"""Read-only line access over an immutable point-in-time document."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from tabdirective.constants import DEFAULT_TAB_WIDTH

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Line:
    """One document line; ``text`` excludes the line break."""

    start: int
    end: int
    text: str

    @property
    def length(self) -> int:
        return self.end - self.start


class SnapshotSource(Protocol):
    """What the heuristics engine needs from a host text buffer.

    Editor hosts satisfy this structurally; :class:`TextSnapshot` is
    the in-process implementation built from a string.
    """

    @property
    def lines(self) -> Sequence[Line]: ...

    @property
    def tab_width(self) -> int: ...

    def char_at(self, offset: int) -> str: ...


class TextSnapshot:
    """Immutable snapshot of a text buffer with its configured tab width."""

    def __init__(
        self,
        text: str,
        lines: Sequence[Line],
        tab_width: int = DEFAULT_TAB_WIDTH,
    ) -> None:
        self._text = text
        self._lines = tuple(lines)
        self._tab_width = tab_width

    @classmethod
    def from_text(
        cls, text: str, tab_width: int = DEFAULT_TAB_WIDTH
    ) -> TextSnapshot:
        """Split *text* on CRLF, CR or LF, recording absolute offsets."""
        lines: list[Line] = []
        start = 0
        for match in _LINE_BREAK.finditer(text):
            lines.append(
                Line(start, match.start(), text[start:match.start()])
            )
            start = match.end()
        if start < len(text) or not lines:
            lines.append(Line(start, len(text), text[start:]))
        elif start == len(text):
            # Trailing line break opens one final empty line, as editors show it
            lines.append(Line(start, start, ""))
        return cls(text, lines, tab_width)

    @property
    def lines(self) -> Sequence[Line]:
        return self._lines

    @property
    def tab_width(self) -> int:
        return self._tab_width

    @property
    def text(self) -> str:
        return self._text

    def char_at(self, offset: int) -> str:
        """Return the character at absolute *offset*.

        Raises IndexError outside ``[0, len(text))``.
        """
        if offset < 0:
            raise IndexError(offset)
        return self._text[offset]

    def __len__(self) -> int:
        return len(self._text)
