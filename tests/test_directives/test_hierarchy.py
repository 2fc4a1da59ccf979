"""Tests for hierarchy nodes and walkers."""

from __future__ import annotations

import gc
import logging
from pathlib import Path

import pytest

from tabdirective.constants import ScopeKind
from tabdirective.directives.hierarchy import (
    DirectoryHierarchy,
    HierarchyNode,
    ScopeTree,
    iter_scopes,
)


class TestHierarchyNode:
    def test_parent_owns_children(self) -> None:
        root = HierarchyNode(Path("/s"), ScopeKind.SOLUTION)
        child = HierarchyNode(Path("/s/p"), ScopeKind.PROJECT, root)
        assert child.parent is root
        assert root.children == [child]

    def test_parent_reference_is_weak(self) -> None:
        root = HierarchyNode(Path("/s"), ScopeKind.SOLUTION)
        child = HierarchyNode(Path("/s/p"), ScopeKind.FOLDER, root)
        del root
        gc.collect()
        assert child.parent is None

    def test_set_parent_moves_node(self) -> None:
        a = HierarchyNode(Path("/a"), ScopeKind.FOLDER)
        b = HierarchyNode(Path("/b"), ScopeKind.FOLDER)
        child = HierarchyNode(Path("/a/c"), ScopeKind.DOCUMENT, a)
        child.set_parent(b)
        assert child.parent is b
        assert a.children == []
        assert b.children == [child]
        child.set_parent(None)
        assert child.parent is None
        assert b.children == []


class TestIterScopes:
    def test_nearest_first(self) -> None:
        root = HierarchyNode(Path("/s"), ScopeKind.SOLUTION)
        folder = HierarchyNode(Path("/s/f"), ScopeKind.FOLDER, root)
        doc = HierarchyNode(Path("/s/f"), ScopeKind.DOCUMENT, folder)
        assert list(iter_scopes(doc)) == [doc, folder, root]

    def test_cycle_is_cut_at_max_depth(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        a = HierarchyNode(Path("/a"), ScopeKind.FOLDER)
        b = HierarchyNode(Path("/b"), ScopeKind.FOLDER, a)
        a.set_parent(b)
        with caplog.at_level(logging.WARNING):
            scopes = list(iter_scopes(a, max_depth=5))
        assert scopes == [a, b, a, b, a]
        assert "hierarchy_depth_exceeded" in caplog.text


class TestScopeTree:
    def test_documents_hang_off_projects(self) -> None:
        tree = ScopeTree(Path("/sln"))
        project = tree.add_project(Path("/sln/app/app.csproj"))
        folder = tree.add_folder(Path("/sln/app/src"), project)
        doc = tree.add_document(Path("/sln/app/src/main.cs"), folder)

        assert tree.find_node(Path("/sln/app/src/main.cs")) is doc
        assert doc.directory == Path("/sln/app/src")
        assert [n.kind for n in iter_scopes(doc)] == [
            ScopeKind.DOCUMENT,
            ScopeKind.FOLDER,
            ScopeKind.PROJECT,
            ScopeKind.SOLUTION,
        ]
        assert project.directory == Path("/sln/app")
        assert tree.solution_root() == Path("/sln")

    def test_project_directory_override(self) -> None:
        tree = ScopeTree()
        project = tree.add_project(
            Path("/build/app.csproj"), directory=Path("/src/app")
        )
        assert project.directory == Path("/src/app")
        assert project.project_file == Path("/build/app.csproj")
        assert project.parent is None

    def test_unknown_document(self) -> None:
        tree = ScopeTree()
        assert tree.find_node(Path("/nowhere.cs")) is None
        assert tree.solution_root() is None


class TestDirectoryHierarchy:
    def test_chain_up_to_root(self, tmp_path: Path) -> None:
        walker = DirectoryHierarchy(tmp_path)
        node = walker.find_node(tmp_path / "a" / "b" / "doc.py")
        assert node is not None
        root = tmp_path.resolve()
        assert [(n.kind, n.directory) for n in iter_scopes(node)] == [
            (ScopeKind.DOCUMENT, root / "a" / "b"),
            (ScopeKind.FOLDER, root / "a"),
            (ScopeKind.SOLUTION, root),
        ]

    def test_document_in_root_relies_on_final_check(
        self, tmp_path: Path
    ) -> None:
        walker = DirectoryHierarchy(tmp_path)
        node = walker.find_node(tmp_path / "doc.py")
        assert node is not None
        assert node.parent is None
        assert walker.solution_root() == tmp_path.resolve()

    def test_nodes_are_reused(self, tmp_path: Path) -> None:
        walker = DirectoryHierarchy(tmp_path)
        first = walker.find_node(tmp_path / "a" / "x.py")
        second = walker.find_node(tmp_path / "a" / "x.py")
        sibling = walker.find_node(tmp_path / "a" / "b" / "y.py")
        assert first is second
        assert sibling is not None and first is not None
        assert sibling.parent is not None
        assert sibling.parent.directory == first.directory

    def test_document_outside_root(self, tmp_path: Path) -> None:
        walker = DirectoryHierarchy(tmp_path / "inner")
        node = walker.find_node(tmp_path / "outer" / "doc.py")
        assert node is not None
        assert node.parent is None

    def test_for_document_finds_checkout_root(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        doc = tmp_path / "src" / "pkg" / "mod.py"
        doc.parent.mkdir(parents=True)
        doc.write_text("x = 1\n")
        walker = DirectoryHierarchy.for_document(doc)
        assert walker.solution_root() == tmp_path.resolve()
