"""Tests for single-file checks and tree scans."""

from __future__ import annotations

from pathlib import Path

import pytest

from tabdirective.advisor import TABS_VS_SPACES_MESSAGE
from tabdirective.config import Settings
from tabdirective.constants import IndentStyle
from tabdirective.directives.hierarchy import DirectoryHierarchy
from tabdirective.scan import check_file, host_defaults, is_binary, scan_tree
from tests.conftest import write_directive, write_document

TABBED = "f() {\n\tg();\n}\n"
TWO_SPACE = "f() {\n  g();\n}\n"


class TestHostDefaults:
    def test_from_settings(self) -> None:
        defaults = host_defaults(Settings(default_tab_width=8))
        assert defaults.tab_size == 8
        assert defaults.indent_size == 8
        assert defaults.indent_style is IndentStyle.SMART
        assert defaults.insert_tabs is False

    def test_explicit_width(self) -> None:
        assert host_defaults(Settings(), 2).tab_size == 2

    def test_none_means_configured_width(self) -> None:
        assert host_defaults(Settings(default_tab_width=3), None).tab_size == 3

    @pytest.mark.parametrize("width", [0, -3])
    def test_non_positive_width_rejected(self, width: int) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            host_defaults(Settings(), width)


class TestCheckFile:
    def test_without_directive_nothing_is_advised(
        self, tmp_path: Path
    ) -> None:
        doc = write_document(tmp_path / "x.c", TABBED)
        report = check_file(doc, DirectoryHierarchy(tmp_path))
        assert report.starts_with_tabs is True
        assert report.directive_path is None
        assert report.settings is None
        assert report.advice is None

    def test_tabs_against_spaces_directive(self, tmp_path: Path) -> None:
        write_directive(tmp_path, "inserttabs: false\nindentsize: 2")
        doc = write_document(tmp_path / "src" / "x.c", TABBED)
        report = check_file(doc, DirectoryHierarchy(tmp_path))

        assert report.directive_path == (tmp_path / "tab.directive").resolve()
        assert report.settings is not None
        assert report.settings.indent_size == 2
        assert report.advice == TABS_VS_SPACES_MESSAGE.format(indent_size=2)

    def test_conforming_file(self, tmp_path: Path) -> None:
        write_directive(tmp_path, "inserttabs: false\nindentsize: 2")
        doc = write_document(tmp_path / "x.c", TWO_SPACE)
        report = check_file(doc, DirectoryHierarchy(tmp_path))
        assert report.advice is None
        assert report.error is None

    def test_broken_directive_reported(self, tmp_path: Path) -> None:
        write_directive(tmp_path, "tabsize: 2\ntabsize: 4")
        doc = write_document(tmp_path / "x.c", TWO_SPACE)
        report = check_file(doc, DirectoryHierarchy(tmp_path))
        assert report.error is not None
        assert "duplicate directive key 'tabsize'" in report.error
        assert report.advice is None


class TestScanTree:
    def test_scan_flags_nonconforming_files(self, tmp_path: Path) -> None:
        write_directive(tmp_path, "inserttabs: false\nindentsize: 2")
        write_document(tmp_path / "good.c", TWO_SPACE)
        write_document(tmp_path / "pkg" / "bad.c", TABBED)
        write_directive(tmp_path / "legacy", "inserttabs: true")
        write_document(tmp_path / "legacy" / "old.c", TABBED)

        report = scan_tree(tmp_path)

        names = sorted(f.path.name for f in report.files)
        assert names == ["bad.c", "good.c", "old.c"]
        assert [f.path.name for f in report.flagged] == ["bad.c"]

    def test_skips_hidden_ignored_and_binary(self, tmp_path: Path) -> None:
        write_document(tmp_path / "keep.c", TWO_SPACE)
        write_document(tmp_path / ".hidden" / "a.c", TABBED)
        write_document(tmp_path / "node_modules" / "b.c", TABBED)
        write_document(tmp_path / "gen" / "c.c", TABBED)
        (tmp_path / ".gitignore").write_text("gen/\n*.log\n")
        write_document(tmp_path / "debug.log", TABBED)
        (tmp_path / "blob.bin").write_bytes(b"\x00\x01\x02")

        report = scan_tree(tmp_path)
        assert sorted(f.path.name for f in report.files) == [
            ".gitignore",
            "keep.c",
        ]

    def test_custom_skip_directories(self, tmp_path: Path) -> None:
        write_document(tmp_path / "out" / "a.c", TABBED)
        write_document(tmp_path / "src" / "b.c", TABBED)
        report = scan_tree(tmp_path, Settings(skip_directories=["out"]))
        assert [f.path.name for f in report.files] == ["b.c"]

    def test_symlink_out_of_root_not_followed(self, tmp_path: Path) -> None:
        outside = write_document(tmp_path / "outside" / "far.c", TABBED)
        root = tmp_path / "root"
        write_document(root / "near.c", TABBED)
        (root / "link").symlink_to(outside.parent, target_is_directory=True)

        report = scan_tree(root)
        assert [f.path.name for f in report.files] == ["near.c"]

    def test_directive_files_are_not_checked(self, tmp_path: Path) -> None:
        write_directive(tmp_path, "tabsize: 2")
        write_directive(tmp_path / "sub", "tabsize: 3")
        write_document(tmp_path / "sub" / "a.c", TWO_SPACE)

        report = scan_tree(tmp_path)
        assert [f.path.name for f in report.files] == ["a.c"]
        assert report.files[0].settings is not None
        assert report.files[0].settings.tab_size == 3

    def test_report_serializes(self, tmp_path: Path) -> None:
        write_directive(tmp_path, "tabsize: 2")
        write_document(tmp_path / "x.c", TWO_SPACE)
        dumped = scan_tree(tmp_path).model_dump(mode="json")
        (entry,) = dumped["files"]
        assert entry["settings"]["tab_size"] == 2
        assert entry["settings"]["indent_style"] == "smart"


def test_is_binary(tmp_path: Path) -> None:
    text = write_document(tmp_path / "t.txt", "hello\n")
    blob = tmp_path / "b.bin"
    blob.write_bytes(b"ab\x00cd")
    assert is_binary(text) is False
    assert is_binary(blob) is True
    assert is_binary(tmp_path / "missing") is True
