"""Command-line entry point: ``outline-todoist``.

Subcommands:

- ``sync FILE``   -- pull completions, push tasks, write the file back.
- ``projects``    -- list Todoist projects (ids for tag mappings).
- ``init-config`` -- write a starter config file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import Config, load_config_from_sources, require_sync_ready
from .config_loader import ensure_config
from .core.client import TodoistClient
from .logger import setup_logging
from .sync.engine import SyncEngine
from .sync.reporter import (
    format_sync_notice,
    format_sync_report,
    result_to_json,
)

logger = logging.getLogger(__name__)


def _overrides(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    if args.token:
        overrides["api_token"] = args.token
    if args.api_url:
        overrides["api_url"] = args.api_url
    if args.debug:
        overrides["debug"] = True
    return overrides


def _load(args: argparse.Namespace) -> Config:
    config, unified, sources = load_config_from_sources(_overrides(args))
    setup_logging(
        mode="cli",
        debug=config.debug,
        log_file=args.log_file or unified.logging.file,
        debug_format=args.log_format,
        level=unified.logging.level,
    )
    logger.debug("Configuration loaded from: %s", ", ".join(sources))
    return config


def cmd_sync(args: argparse.Namespace) -> int:
    config = _load(args)
    require_sync_ready(config)

    path = Path(args.file).expanduser().resolve()
    engine = SyncEngine.from_config(config)
    result = engine.sync_file(path)

    if args.json:
        print(json.dumps(result_to_json(result), indent=2))
    elif args.verbose:
        print(format_sync_report(result, source=str(path)))
    else:
        print(format_sync_notice(result))
    return 1 if result.failed else 0


def cmd_projects(args: argparse.Namespace) -> int:
    config = _load(args)
    collections = TodoistClient(config).list_collections()

    if args.json:
        print(json.dumps([c.model_dump() for c in collections], indent=2))
        return 0

    print(f"Connected! Found {len(collections)} projects")
    for collection in collections:
        print(f"  {collection.id}  {collection.name}")
    return 0


def cmd_init_config(args: argparse.Namespace) -> int:
    target = Path(args.path).expanduser() if args.path else None
    print(f"Config file: {ensure_config(target)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="outline-todoist",
        description="Sync Markdown task outlines with Todoist",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync one note (token from TODOIST_API_TOKEN or config.yml)
  outline-todoist sync notes/tasks.md

  # Look up project ids for tag mappings
  outline-todoist projects

  # Create .outline_todoist/config.yml with commented examples
  outline-todoist init-config
        """,
    )
    parser.add_argument(
        "--token",
        help="Todoist API token (takes precedence over TODOIST_API_TOKEN and config files)"
        " (visible in process list -- prefer the env var)",
    )
    parser.add_argument(
        "--api-url",
        help="Override the Todoist REST API base URL",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument(
        "--log-format",
        choices=("text", "json"),
        default="text",
        help="Log line format (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"outline-todoist version {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sync_parser = sub.add_parser("sync", help="Sync one outline file")
    sync_parser.add_argument("file", help="Markdown file to sync")
    sync_parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )
    sync_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print the full report with every failure",
    )
    sync_parser.set_defaults(func=cmd_sync)

    projects_parser = sub.add_parser(
        "projects", help="List Todoist projects"
    )
    projects_parser.add_argument(
        "--json", action="store_true", help="Print projects as JSON"
    )
    projects_parser.set_defaults(func=cmd_projects)

    init_parser = sub.add_parser(
        "init-config", help="Create a starter config file"
    )
    init_parser.add_argument(
        "path", nargs="?", help="Where to create it (default: ./.outline_todoist/config.yml)"
    )
    init_parser.set_defaults(func=cmd_init_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Sync failed: {e}", file=sys.stderr)
        return 1


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
