"""CLI entry point — ``tabdirective check``, ``scan`` and ``watch``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from tabdirective import __version__
from tabdirective.config import Settings
from tabdirective.constants import RefreshOutcome
from tabdirective.directives.hierarchy import DirectoryHierarchy, HierarchyWalker
from tabdirective.dispatch import AsyncioTaskQueue
from tabdirective.logging_config import setup_logging
from tabdirective.observability import SettingsEvent, initialize_dispatcher
from tabdirective.reconciler import InMemorySettingsSink
from tabdirective.scan import check_file, host_defaults, scan_tree
from tabdirective.schemas import FileReport
from tabdirective.session import DocumentSession
from tabdirective.watch.service import WatchdogFileWatchService

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"tabdirective {__version__}")
        return

    settings = Settings()
    setup_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "check":
        _run_check(args, settings)
    elif args.command == "scan":
        _run_scan(args, settings)
    elif args.command == "watch":
        _run_watch(args, settings)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tabdirective",
        description=(
            "Detect indentation style and check it against "
            "the nearest tab.directive file."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command")

    check = sub.add_parser("check", help="Check one file")
    check.add_argument("file", type=str, help="File to check")
    check.add_argument(
        "--root",
        "-r",
        default=None,
        help="Solution root (default: nearest VCS checkout)",
    )
    check.add_argument(
        "--tab-width",
        "-t",
        type=_positive_int,
        default=None,
        help="Editor tab width (default: from settings)",
    )
    check.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )

    scan = sub.add_parser("scan", help="Check every file under a directory")
    scan.add_argument("root", type=str, help="Directory to scan")
    scan.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )

    watch = sub.add_parser(
        "watch",
        help="Follow a file's directive and log settings changes",
    )
    watch.add_argument("file", type=str, help="File whose directive to follow")
    watch.add_argument(
        "--root",
        "-r",
        default=None,
        help="Solution root (default: nearest VCS checkout)",
    )
    watch.add_argument(
        "--interval",
        type=float,
        default=2.0,
        help="Seconds between re-resolution attempts (default: 2.0)",
    )

    return parser


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        msg = f"{raw!r} is not an integer"
        raise argparse.ArgumentTypeError(msg) from None
    if value <= 0:
        msg = f"{raw!r} must be a positive integer"
        raise argparse.ArgumentTypeError(msg)
    return value


def _walker_for(path: Path, root: str | None) -> HierarchyWalker:
    if root is not None:
        return DirectoryHierarchy(Path(root))
    return DirectoryHierarchy.for_document(path)


def _require_file(raw: str) -> Path:
    path = Path(raw).resolve()
    if not path.is_file():
        print(f"Error: {path} is not a file", file=sys.stderr)
        sys.exit(1)
    return path


def _run_check(args: argparse.Namespace, settings: Settings) -> None:
    """Execute the check command."""
    path = _require_file(args.file)
    report = check_file(
        path,
        _walker_for(path, args.root),
        settings,
        initial=host_defaults(settings, args.tab_width),
    )
    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        _print_report(report)
    if report.advice or report.error:
        sys.exit(2)


def _run_scan(args: argparse.Namespace, settings: Settings) -> None:
    """Execute the scan command."""
    root = Path(args.root).resolve()
    if not root.is_dir():
        print(f"Error: {root} is not a directory", file=sys.stderr)
        sys.exit(1)
    report = scan_tree(root, settings)
    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        for entry in report.flagged:
            _print_report(entry)
        print(f"{len(report.files)} files, {len(report.flagged)} flagged")
    if report.flagged:
        sys.exit(2)


def _style_label(report: FileReport) -> str:
    if report.starts_with_space and report.starts_with_tabs:
        return "mixed"
    if report.starts_with_tabs:
        return "tabs"
    if report.starts_with_space:
        return "spaces"
    return "none"


def _print_report(report: FileReport) -> None:
    style = _style_label(report)
    print(
        f"{report.path}: indent={style} "
        f"guessed_size={report.guessed_indent_size}"
    )
    if report.directive_path is not None:
        print(f"  directive: {report.directive_path}")
    if report.error:
        print(f"  error: {report.error}")
    if report.advice:
        print(f"  {report.advice}")


def _run_watch(args: argparse.Namespace, settings: Settings) -> None:
    """Execute the watch command until interrupted."""
    path = _require_file(args.file)
    try:
        asyncio.run(
            _watch(path, _walker_for(path, args.root), settings, args.interval)
        )
    except KeyboardInterrupt:
        print("Stopped.")


async def _watch(
    path: Path,
    walker: HierarchyWalker,
    settings: Settings,
    interval: float,
) -> None:
    loop = asyncio.get_running_loop()
    session = DocumentSession(
        path,
        walker=walker,
        initial=host_defaults(settings),
        sink=InMemorySettingsSink(),
        watch_service=WatchdogFileWatchService(
            settings.watch_join_timeout_seconds
        ),
        tasks=AsyncioTaskQueue(loop),
        settings=settings,
        dispatcher=initialize_dispatcher(),
    )

    def on_event(event: SettingsEvent) -> None:
        if event.type == "settings_changed" and event.settings is not None:
            s = event.settings
            print(
                f"{event.document}: tabsize={s.tab_size} "
                f"indentsize={s.indent_size} inserttabs={s.insert_tabs} "
                f"indentstyle={s.indent_style.value}"
            )

    session.subscribe(on_event)
    with session:
        result = session.refresh()
        print(f"Watching {path} ({result.outcome.value})")
        while True:
            await asyncio.sleep(interval)
            if _needs_refresh(session):
                session.refresh()


def _needs_refresh(session: DocumentSession) -> bool:
    """Stand-in for the host's focus refresh while no directive is resolved.

    A failed watch setup is not retried automatically.
    """
    watcher = session.watcher
    if watcher.state.resolved_path is not None:
        return False
    last = watcher.last_result
    return last is None or last.outcome != RefreshOutcome.WATCH_FAILED
