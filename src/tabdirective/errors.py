"""Error types for directive resolution and reconciliation.

Classification of a whole refresh cycle lives in
:class:`tabdirective.constants.RefreshOutcome`; these exceptions carry
the detail for the failures that deserve one.
"""

from __future__ import annotations

from pathlib import Path


class DirectiveError(Exception):
    """Base class for directive-side failures."""


class DuplicateKeyError(DirectiveError):
    """A directive file declares the same (case-folded) key twice."""

    def __init__(self, key: str, path: Path | None = None) -> None:
        where = f" in {path}" if path is not None else ""
        super().__init__(f"duplicate directive key '{key}'{where}")
        self.key = key
        self.path = path


class MalformedValueError(DirectiveError):
    """A recognized key has a value that does not parse for its type."""

    def __init__(self, key: str, value: str, expected: str) -> None:
        super().__init__(
            f"directive '{key}' expects {expected}, got '{value}'"
        )
        self.key = key
        self.value = value
        self.expected = expected


class WatchSetupError(DirectiveError):
    """The directory holding a directive file cannot be monitored."""

    def __init__(self, directory: Path, reason: str) -> None:
        super().__init__(f"cannot watch {directory}: {reason}")
        self.directory = directory
        self.reason = reason
