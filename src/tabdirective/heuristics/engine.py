"""Infer indentation style from document text alone.

Two passes over an immutable snapshot:

* style detection: does the file indent with tabs, with spaces, or both?
* indent-size guess: how far does the line after an opening brace move
  relative to the brace line?

Both are best-effort and never raise; an empty or inconclusive document
yields ``IndentObservation(False, False, 0)``.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from tabdirective.config import Settings
from tabdirective.constants import (
    BRACE_TRAILER_CHARS,
    HEURISTICS_MAX_GUESSES,
    HEURISTICS_MAX_LINES,
    GuessPolicy,
)
from tabdirective.heuristics.snapshot import Line, SnapshotSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndentObservation:
    """What one heuristics pass observed in one snapshot."""

    starts_with_space: bool = False
    starts_with_tabs: bool = False
    guessed_indent_size: int = 0

    @property
    def is_mixed(self) -> bool:
        return self.starts_with_space and self.starts_with_tabs


def analyze(
    snapshot: SnapshotSource,
    tab_width: int | None = None,
    *,
    max_lines: int = HEURISTICS_MAX_LINES,
    max_guesses: int = HEURISTICS_MAX_GUESSES,
    policy: GuessPolicy = GuessPolicy.LEAST_FREQUENT,
) -> IndentObservation:
    """Observe the indentation convention of *snapshot*.

    *tab_width* defaults to the snapshot's configured width.
    """
    width = snapshot.tab_width if tab_width is None else tab_width
    spaces, tabs = _detect_style(snapshot.lines, width)
    guess = _guess_indent_size(
        snapshot, max_lines, max_guesses, policy
    )
    logger.debug(
        "event=heuristics_done spaces=%s tabs=%s guess=%d",
        spaces,
        tabs,
        guess,
    )
    return IndentObservation(
        starts_with_space=spaces,
        starts_with_tabs=tabs,
        guessed_indent_size=guess,
    )


class IndentHeuristics:
    """:func:`analyze` with limits and tie-break policy bound from settings."""

    def __init__(self, settings: Settings | None = None) -> None:
        cfg = settings or Settings()
        self._max_lines = cfg.heuristics_max_lines
        self._max_guesses = cfg.heuristics_max_guesses
        self._policy = cfg.guess_policy

    @property
    def policy(self) -> GuessPolicy:
        return self._policy

    def analyze(
        self, snapshot: SnapshotSource, tab_width: int | None = None
    ) -> IndentObservation:
        return analyze(
            snapshot,
            tab_width,
            max_lines=self._max_lines,
            max_guesses=self._max_guesses,
            policy=self._policy,
        )


# ── Pass 1: style detection ──────────────────────────────


def _detect_style(
    lines: Sequence[Line], tab_width: int
) -> tuple[bool, bool]:
    spaces = False
    tabs = False
    for line in lines:
        text = line.text
        if not text:
            continue
        first = text[0]
        if first == "\t":
            tabs = True
        elif first == " " and not spaces:
            spaces = _is_space_indent(text, tab_width)
        if spaces and tabs:
            break
    return spaces, tabs


def _is_space_indent(text: str, tab_width: int) -> bool:
    """Leading run counts as spaces if it reaches a tab stop or hits a tab.

    A short run followed by code is a continuation indent, not style.
    """
    count = 0
    for ch in text:
        if ch == " ":
            count += 1
            if count >= tab_width:
                return True
        elif ch == "\t":
            return True
        else:
            return False
    return False


# ── Pass 2: indent-size guess ────────────────────────────


def _guess_indent_size(
    snapshot: SnapshotSource,
    max_lines: int,
    max_guesses: int,
    policy: GuessPolicy,
) -> int:
    guesses: list[int] = []
    lines_seen = 0
    brace_spaces = 0
    measure_next = False

    for line in snapshot.lines:
        if lines_seen >= max_lines or len(guesses) >= max_guesses:
            break

        if measure_next:
            if not line.text:
                # blank line between brace and body; not a sample
                continue
            guesses.append(_leading_spaces(line.text) - brace_spaces)
            measure_next = False
        elif _opens_block(snapshot, line):
            measure_next = True
            brace_spaces = _leading_spaces(line.text)
        lines_seen += 1

    if not guesses:
        return 0
    return _pick_bucket(guesses, policy)


def _opens_block(snapshot: SnapshotSource, line: Line) -> bool:
    """True if an opening brace sits among the line's trailing characters.

    Scans backward from the end of the line; the first column is never
    examined, so a brace alone in column 0 does not open a block.
    """
    found = False
    for offset in range(line.end - 1, line.start, -1):
        ch = snapshot.char_at(offset)
        if ch == "{":
            found = True
        elif ch not in BRACE_TRAILER_CHARS:
            break
    return found


def _leading_spaces(text: str) -> int:
    return len(text) - len(text.lstrip(" "))


def _pick_bucket(guesses: list[int], policy: GuessPolicy) -> int:
    """Bucket guesses by value; ties go to the value seen first."""
    counts = Counter(guesses)
    if policy == GuessPolicy.MOST_FREQUENT:
        return max(counts, key=counts.__getitem__)
    return min(counts, key=counts.__getitem__)
