"""Tests for the directive error hierarchy."""

from __future__ import annotations

from pathlib import Path

from tabdirective.errors import (
    DirectiveError,
    DuplicateKeyError,
    MalformedValueError,
    WatchSetupError,
)


class TestDuplicateKeyError:
    def test_without_path(self) -> None:
        err = DuplicateKeyError("tabsize")
        assert str(err) == "duplicate directive key 'tabsize'"
        assert err.path is None

    def test_with_path(self) -> None:
        err = DuplicateKeyError("tabsize", Path("/w/tab.directive"))
        assert str(err) == (
            "duplicate directive key 'tabsize' in /w/tab.directive"
        )


class TestMalformedValueError:
    def test_attributes(self) -> None:
        err = MalformedValueError("inserttabs", "yes", "true or false")
        assert err.key == "inserttabs"
        assert err.value == "yes"
        assert "expects true or false" in str(err)


def test_all_share_a_base() -> None:
    for err in (
        DuplicateKeyError("k"),
        MalformedValueError("k", "v", "x"),
        WatchSetupError(Path("/d"), "gone"),
    ):
        assert isinstance(err, DirectiveError)


def test_watch_setup_error_message() -> None:
    err = WatchSetupError(Path("/d"), "not a directory")
    assert err.directory == Path("/d")
    assert err.reason == "not a directory"
    assert str(err) == "cannot watch /d: not a directory"
