"""Find the nearest directive file enclosing a document."""

from __future__ import annotations

import logging
from pathlib import Path

from tabdirective.constants import (
    DIRECTIVE_FILENAME,
    MAX_HIERARCHY_DEPTH,
    ScopeKind,
)
from tabdirective.directives.hierarchy import HierarchyWalker, iter_scopes

logger = logging.getLogger(__name__)


def resolve_directive(
    document_path: Path,
    walker: HierarchyWalker,
    *,
    filename: str = DIRECTIVE_FILENAME,
    max_depth: int = MAX_HIERARCHY_DEPTH,
) -> Path | None:
    """Return the directive file nearest to *document_path*, or None.

    Walks outward from the document's node. Project nodes also consult
    the folder holding the project file. If the walk runs out, the
    solution root is checked last. Nearest enclosing scope wins.
    """
    checked: set[Path] = set()
    node = walker.find_node(Path(document_path))
    if node is not None:
        for scope in iter_scopes(node, max_depth):
            found = _probe(scope.directory, filename, checked)
            if found is None and scope.kind == ScopeKind.PROJECT:
                if scope.project_file is not None:
                    found = _probe(
                        scope.project_file.parent, filename, checked
                    )
            if found is not None:
                logger.debug(
                    "event=directive_resolved path=%s scope=%s",
                    found,
                    scope.kind.value,
                )
                return found

    root = walker.solution_root()
    if root is not None:
        found = _probe(root, filename, checked)
        if found is not None:
            logger.debug("event=directive_resolved path=%s scope=root", found)
            return found

    logger.debug("event=directive_not_found document=%s", document_path)
    return None


def _probe(directory: Path, filename: str, checked: set[Path]) -> Path | None:
    if directory in checked:
        return None
    checked.add(directory)
    candidate = directory / filename
    return candidate if candidate.is_file() else None
