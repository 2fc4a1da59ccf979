"""Check files against their directives, one at a time or a whole tree."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pathspec

from tabdirective.advisor import advise
from tabdirective.config import Settings
from tabdirective.constants import BINARY_DETECTION_BUFFER, IndentStyle
from tabdirective.directives.hierarchy import DirectoryHierarchy, HierarchyWalker
from tabdirective.directives.locator import resolve_directive
from tabdirective.directives.parser import DirectiveSet, read_directives
from tabdirective.errors import DirectiveError
from tabdirective.heuristics.engine import IndentHeuristics
from tabdirective.heuristics.snapshot import TextSnapshot
from tabdirective.models import EffectiveSettings
from tabdirective.reconciler import InMemorySettingsSink, apply_directives
from tabdirective.schemas import FileReport, ScanReport, SettingsReport

logger = logging.getLogger(__name__)

type _DirectiveCache = dict[Path, DirectiveSet | DirectiveError | OSError]


def host_defaults(
    settings: Settings, tab_width: int | None = None
) -> EffectiveSettings:
    """Editor configuration assumed when no editor is present."""
    width = settings.default_tab_width if tab_width is None else tab_width
    if width <= 0:
        raise ValueError(f"tab width must be positive, got {width}")
    return EffectiveSettings(
        tab_size=width,
        indent_size=width,
        indent_style=IndentStyle.SMART,
        insert_tabs=False,
    )


def check_file(
    path: Path,
    walker: HierarchyWalker,
    settings: Settings | None = None,
    *,
    initial: EffectiveSettings | None = None,
    cache: _DirectiveCache | None = None,
) -> FileReport:
    """Analyze *path* and compare it with its nearest directive.

    Without a directive there is nothing mandated, so no advice.
    """
    cfg = settings or Settings()
    baseline = initial or host_defaults(cfg)
    text = path.read_text(encoding="utf-8", errors="replace")
    snapshot = TextSnapshot.from_text(text, baseline.tab_size)
    observation = IndentHeuristics(cfg).analyze(snapshot)
    report = FileReport(
        path=path,
        starts_with_space=observation.starts_with_space,
        starts_with_tabs=observation.starts_with_tabs,
        guessed_indent_size=observation.guessed_indent_size,
    )

    directive_path = resolve_directive(
        path,
        walker,
        filename=cfg.directive_filename,
        max_depth=cfg.max_hierarchy_depth,
    )
    if directive_path is None:
        return report
    report.directive_path = directive_path

    loaded = _load(directive_path, cache)
    if isinstance(loaded, (DirectiveError, OSError)):
        report.error = str(loaded)
        return report

    result = apply_directives(loaded, baseline, InMemorySettingsSink())
    effective = result.settings
    report.settings = SettingsReport(
        tab_size=effective.tab_size,
        indent_size=effective.indent_size,
        indent_style=effective.indent_style,
        insert_tabs=effective.insert_tabs,
    )
    report.advice = advise(observation, effective)
    return report


def scan_tree(root: Path, settings: Settings | None = None) -> ScanReport:
    """Check every text file under *root* against its directive.

    * Skips hidden directories and ``settings.skip_directories``.
    * Honors ``.gitignore`` at the root.
    * Skips binary files (null byte in the first 8192 bytes) and the
      directive files themselves.
    """
    cfg = settings or Settings()
    root = Path(root).resolve()
    walker = DirectoryHierarchy(root)
    cache: _DirectiveCache = {}
    report = ScanReport(root=root)

    ignore = _load_ignore_spec(root)
    for file_path in _iter_checkable_files(root, cfg, ignore):
        try:
            report.files.append(
                check_file(file_path, walker, cfg, cache=cache)
            )
        except OSError as exc:
            logger.warning(
                "event=scan_read_failed path=%s error=%s", file_path, exc
            )
            report.files.append(FileReport(path=file_path, error=str(exc)))
    logger.info(
        "event=scan_done root=%s files=%d flagged=%d",
        root,
        len(report.files),
        len(report.flagged),
    )
    return report


def is_binary(path: Path) -> bool:
    """Return True if the file appears to be binary (null byte in first N bytes)."""
    try:
        with open(path, "rb") as f:
            chunk = f.read(BINARY_DETECTION_BUFFER)
        return b"\x00" in chunk
    except OSError:
        return True


def _load(
    path: Path, cache: _DirectiveCache | None
) -> DirectiveSet | DirectiveError | OSError:
    if cache is not None and path in cache:
        return cache[path]
    loaded: DirectiveSet | DirectiveError | OSError
    try:
        loaded = read_directives(path)
    except (DirectiveError, OSError) as exc:
        logger.warning("event=directive_unusable path=%s error=%s", path, exc)
        loaded = exc
    if cache is not None:
        cache[path] = loaded
    return loaded


def _iter_checkable_files(
    root: Path, settings: Settings, ignore: pathspec.PathSpec
) -> Iterator[Path]:
    """Yield checkable text files under *root*.

    A folder's files come before its subfolders, each group sorted.

    Hidden directories, ``settings.skip_directories`` and ignored paths
    are pruned. Directive files and binary files are not yielded, and
    symlinks leading out of *root* are not followed.
    """
    skip = set(settings.skip_directories)
    pending = [root]
    while pending:
        directory = pending.pop()
        subdirs: list[Path] = []
        for entry in sorted(directory.iterdir()):
            if entry.is_symlink() and not entry.resolve().is_relative_to(root):
                continue
            rel = entry.relative_to(root).as_posix()
            if entry.is_dir():
                if (
                    not entry.name.startswith(".")
                    and entry.name not in skip
                    and not ignore.match_file(rel + "/")
                ):
                    subdirs.append(entry)
            elif (
                entry.is_file()
                and entry.name != settings.directive_filename
                and not ignore.match_file(rel)
                and not is_binary(entry)
            ):
                yield entry
        pending.extend(reversed(subdirs))


def _load_ignore_spec(root: Path) -> pathspec.PathSpec:
    """Patterns from ``root/.gitignore``; empty when absent or unreadable."""
    try:
        content = (root / ".gitignore").read_text(encoding="utf-8")
    except OSError:
        content = ""
    return pathspec.PathSpec.from_lines("gitignore", content.splitlines())
