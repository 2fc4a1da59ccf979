"""Containment hierarchy: document -> folder/project -> solution root.

Trees are built top-down and walked bottom-up. A node owns its children;
the parent pointer is a ``weakref`` back-reference used only for upward
traversal, so a walker must keep its tree alive (both walkers here hold
every node they create).
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from tabdirective.constants import MAX_HIERARCHY_DEPTH, ScopeKind

logger = logging.getLogger(__name__)

# Directory markers that end an upward filesystem walk
ROOT_MARKERS = (".git", ".hg", ".svn")


class HierarchyNode:
    """One level of containment and the directory it stands for."""

    def __init__(
        self,
        directory: Path,
        kind: ScopeKind,
        parent: HierarchyNode | None = None,
        *,
        project_file: Path | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.kind = kind
        self.project_file = project_file
        self.children: list[HierarchyNode] = []
        self._parent: weakref.ref[HierarchyNode] | None = None
        if parent is not None:
            self.set_parent(parent)

    @property
    def parent(self) -> HierarchyNode | None:
        if self._parent is None:
            return None
        return self._parent()

    def set_parent(self, parent: HierarchyNode | None) -> None:
        """Move this node under *parent* (or detach it with ``None``)."""
        current = self.parent
        if current is not None and self in current.children:
            current.children.remove(self)
        if parent is None:
            self._parent = None
            return
        self._parent = weakref.ref(parent)
        parent.children.append(self)

    def __repr__(self) -> str:
        return f"HierarchyNode({self.kind.value}, {self.directory})"


class HierarchyWalker(Protocol):
    """Host view of the containment hierarchy around a document."""

    def find_node(self, document_path: Path) -> HierarchyNode | None: ...

    def solution_root(self) -> Path | None: ...


def iter_scopes(
    node: HierarchyNode, max_depth: int = MAX_HIERARCHY_DEPTH
) -> Iterator[HierarchyNode]:
    """Yield *node* and its ancestors, nearest first.

    Stops after *max_depth* nodes so a cyclic host hierarchy cannot
    loop forever.
    """
    current: HierarchyNode | None = node
    steps = 0
    while current is not None:
        if steps >= max_depth:
            logger.warning(
                "event=hierarchy_depth_exceeded max_depth=%d start=%s",
                max_depth,
                node.directory,
            )
            return
        yield current
        steps += 1
        current = current.parent


class ScopeTree:
    """Explicit solution/project/folder/document tree supplied by a host."""

    def __init__(self, solution_dir: Path | None = None) -> None:
        self._root: HierarchyNode | None = None
        if solution_dir is not None:
            self._root = HierarchyNode(Path(solution_dir), ScopeKind.SOLUTION)
        self._nodes: list[HierarchyNode] = []
        self._documents: dict[Path, HierarchyNode] = {}

    @property
    def root(self) -> HierarchyNode | None:
        return self._root

    def add_project(
        self,
        project_file: Path,
        parent: HierarchyNode | None = None,
        *,
        directory: Path | None = None,
    ) -> HierarchyNode:
        """Add a project; its directory defaults to the project file's."""
        project_file = Path(project_file)
        node = HierarchyNode(
            directory or project_file.parent,
            ScopeKind.PROJECT,
            parent or self._root,
            project_file=project_file,
        )
        self._nodes.append(node)
        return node

    def add_folder(
        self, directory: Path, parent: HierarchyNode
    ) -> HierarchyNode:
        node = HierarchyNode(Path(directory), ScopeKind.FOLDER, parent)
        self._nodes.append(node)
        return node

    def add_document(
        self, path: Path, parent: HierarchyNode | None = None
    ) -> HierarchyNode:
        path = Path(path)
        node = HierarchyNode(
            path.parent, ScopeKind.DOCUMENT, parent or self._root
        )
        self._nodes.append(node)
        self._documents[path] = node
        return node

    def find_node(self, document_path: Path) -> HierarchyNode | None:
        return self._documents.get(Path(document_path))

    def solution_root(self) -> Path | None:
        return self._root.directory if self._root is not None else None


class DirectoryHierarchy:
    """Plain-filesystem hierarchy: every folder between a document and *root*.

    The document node stands for the document's own folder; its parent is
    the folder above, up to the root node. Documents directly in *root*,
    or outside it, get a lone document node and rely on the final
    solution-root check.
    """

    def __init__(self, root: Path) -> None:
        self._root_dir = Path(root).resolve()
        self._root = HierarchyNode(self._root_dir, ScopeKind.SOLUTION)
        self._folders: dict[Path, HierarchyNode] = {
            self._root_dir: self._root
        }
        self._documents: dict[Path, HierarchyNode] = {}

    @classmethod
    def for_document(cls, document_path: Path) -> DirectoryHierarchy:
        """Root at the nearest enclosing VCS checkout, else the drive anchor."""
        start = Path(document_path).resolve().parent
        for candidate in (start, *start.parents):
            if any((candidate / m).exists() for m in ROOT_MARKERS):
                return cls(candidate)
        return cls(Path(start.anchor))

    def find_node(self, document_path: Path) -> HierarchyNode | None:
        path = Path(document_path).resolve()
        node = self._documents.get(path)
        if node is not None:
            return node
        folder = path.parent
        parent = (
            self._folder_node(folder.parent)
            if folder != self._root_dir
            and folder.is_relative_to(self._root_dir)
            else None
        )
        node = HierarchyNode(folder, ScopeKind.DOCUMENT, parent)
        self._documents[path] = node
        return node

    def solution_root(self) -> Path | None:
        return self._root_dir

    def _folder_node(self, directory: Path) -> HierarchyNode:
        existing = self._folders.get(directory)
        if existing is not None:
            return existing
        node = HierarchyNode(
            directory,
            ScopeKind.FOLDER,
            self._folder_node(directory.parent),
        )
        self._folders[directory] = node
        return node
