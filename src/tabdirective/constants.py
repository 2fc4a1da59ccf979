"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so values read from directive files,
environment variables and JSON output compare against them directly.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class IndentStyle(StrEnum):
    """Editor auto-indent mode declared by ``indentstyle``."""

    SMART = "smart"
    NONE = "none"
    BLOCK = "block"


class DirectiveKey(StrEnum):
    """Directive keys the reconciler understands (already lowercased)."""

    INDENT_STYLE = "indentstyle"
    TAB_SIZE = "tabsize"
    INDENT_SIZE = "indentsize"
    INSERT_TABS = "inserttabs"


class ScopeKind(StrEnum):
    """Level of containment a hierarchy node represents."""

    DOCUMENT = "document"
    FOLDER = "folder"
    PROJECT = "project"
    SOLUTION = "solution"


class GuessPolicy(StrEnum):
    """Which bucket of indent-size guesses wins.

    LEAST_FREQUENT reproduces the behaviour editors have historically
    shipped with; MOST_FREQUENT picks the dominant guess.
    """

    LEAST_FREQUENT = "least_frequent"
    MOST_FREQUENT = "most_frequent"


class RefreshOutcome(StrEnum):
    """Result classification of one directive refresh cycle."""

    APPLIED = "applied"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not_found"
    PARSE_FAILED = "parse_failed"
    IO_FAILED = "io_failed"
    WATCH_FAILED = "watch_failed"


# ── Directive Files ──────────────────────────────────────

DIRECTIVE_FILENAME = "tab.directive"
MAX_HIERARCHY_DEPTH = 64

# Largest size value a directive may set (signed 32-bit)
MAX_DIRECTIVE_SIZE = 2**31 - 1

# ── Heuristics ───────────────────────────────────────────

HEURISTICS_MAX_LINES = 400  # sample guard for very large files
HEURISTICS_MAX_GUESSES = 20
DEFAULT_TAB_WIDTH = 4

# Characters allowed after an opening brace at the end of a line
BRACE_TRAILER_CHARS = frozenset("\t }\n\r")

# ── Misc ─────────────────────────────────────────────────

BINARY_DETECTION_BUFFER = 8192
WATCH_JOIN_TIMEOUT_SECONDS = 2.0
