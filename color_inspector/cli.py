"""CLI entrypoints for color-inspector commands."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from .config import REPORT_FORMATS, ConfigError, InspectorConfig, clamp_scan_minutes, load_config
from .logging import configure_logging, get_logger
from .orchestrator import ColorInspector, discover_workspace
from .report import ReportRenderer


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
        "default": argparse.SUPPRESS if suppress_default else False,
    }
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_scan_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Root file whose import closure is scanned.")
    parser.add_argument(
        "--workspace",
        default=None,
        help="Workspace root for `/` and alias imports (defaults to the nearest project root).",
    )
    parser.add_argument(
        "--max-files",
        type=int,
        default=None,
        help="Maximum number of files to visit (overrides imports.max_files).",
    )
    parser.add_argument(
        "--format",
        choices=REPORT_FORMATS,
        default=None,
        help="Report format (overrides report.format).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="color-inspector",
        description="Inventory the colors used across a file and its explicit imports.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        help="Scan a root file once and print the color report.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_scan_options(scan_parser)

    watch_parser = subparsers.add_parser(
        "watch",
        help="Rescan a root file periodically and print each report.",
    )
    _add_verbose_option(watch_parser, suppress_default=True)
    _add_scan_options(watch_parser)
    watch_parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Minutes between scans, clamped to 1-10 (overrides report.auto_scan_minutes).",
    )
    watch_parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Stop after this many scans (runs until interrupted by default).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing /scan.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for color-inspector commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    if args.max_files is not None and args.max_files < 1:
        parser.exit(1, "--max-files must be at least 1\n")
    root = Path(args.path).expanduser()
    if not root.is_file():
        parser.exit(1, f"Root file not found: {root}\n")
    workspace = Path(args.workspace).expanduser() if args.workspace else discover_workspace(root)

    try:
        config = load_config(workspace)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "scan":
        _run_scan(parser, args, config, root, workspace)
    elif args.command == "watch":
        _run_watch(parser, args, config, root, workspace)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_scan(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: InspectorConfig,
    root: Path,
    workspace: Path,
) -> None:
    print(_scan_once(parser, args, config, root, workspace), end="")


def _run_watch(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: InspectorConfig,
    root: Path,
    workspace: Path,
) -> None:
    logger = get_logger("cli")
    interval = args.interval if args.interval is not None else config.report.auto_scan_minutes
    minutes = clamp_scan_minutes(interval) or 1
    config.report.auto_scan_minutes = minutes
    completed = 0
    try:
        while True:
            print(_scan_once(parser, args, config, root, workspace), end="", flush=True)
            completed += 1
            if args.iterations is not None and completed >= args.iterations:
                break
            logger.info("Next scan in %d min", minutes)
            time.sleep(minutes * 60)
    except KeyboardInterrupt:
        logger.info("Stopped after %d scans", completed)


def _scan_once(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: InspectorConfig,
    root: Path,
    workspace: Path,
) -> str:
    inspector = ColorInspector(config=config)
    try:
        inventory = inspector.scan(root, workspace, max_files=args.max_files)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except RuntimeError as exc:
        parser.exit(1, f"color-inspector scan failed: {exc}\nRun with --verbose for more details.\n")
    renderer = ReportRenderer(
        max_usages=config.report.max_usages,
        auto_scan_minutes=config.report.auto_scan_minutes,
    )
    return renderer.render(inventory, args.format or config.report.format)


if __name__ == "__main__":
    main(sys.argv[1:])
