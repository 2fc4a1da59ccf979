"""Directive file discovery and parsing."""

from tabdirective.directives.hierarchy import (
    DirectoryHierarchy,
    HierarchyNode,
    HierarchyWalker,
    ScopeTree,
    iter_scopes,
)
from tabdirective.directives.locator import resolve_directive
from tabdirective.directives.parser import (
    DirectiveSet,
    parse_directives,
    read_directives,
)

__all__ = [
    "DirectiveSet",
    "DirectoryHierarchy",
    "HierarchyNode",
    "HierarchyWalker",
    "ScopeTree",
    "iter_scopes",
    "parse_directives",
    "read_directives",
    "resolve_directive",
]
