"""Parse ``key: value`` directives out of free-form text."""

from __future__ import annotations

import re
from pathlib import Path

from tabdirective.errors import DuplicateKeyError

type DirectiveSet = dict[str, str]

# key, optional whitespace, colon, optional whitespace, path-ish value
DIRECTIVE_PATTERN = re.compile(
    r"\b(?P<key>\w+)\s*:\s*(?P<value>[~\\/\w.]+)\b"
)


def parse_directives(
    content: str, *, source: Path | None = None
) -> DirectiveSet:
    """Collect every directive in *content*, keys lowercased, in file order.

    Layout is not significant; several directives may share a line.
    Raises DuplicateKeyError if a key appears twice.
    """
    directives: DirectiveSet = {}
    for match in DIRECTIVE_PATTERN.finditer(content):
        key = match.group("key").lower()
        if key in directives:
            raise DuplicateKeyError(key, source)
        directives[key] = match.group("value")
    return directives


def read_directives(path: Path) -> DirectiveSet:
    """Read and parse a directive file. OSError propagates."""
    content = Path(path).read_text(encoding="utf-8-sig", errors="replace")
    return parse_directives(content, source=Path(path))
