#!/usr/bin/env python3
"""
Remindian CLI

Syncs Markdown checklist lines (`- [ ] Task  %% comment %%`) with
Apple Reminders.
"""

import argparse
import json
import logging
import sqlite3
import sys
from pathlib import Path

from .apple_reminders import AppleReminders
from .checklist_parser import parse_lines
from .sync_engine import SyncEngine
from .sync_log import SyncLog
from . import config

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_NOT_FOUND = 2
EXIT_FAILED = 3


def configure_logging(verbose: bool = False):
    """Configure root logging from REMINDIAN_LOG_LEVEL or --verbose."""
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s"
    )


def _print_items(items, as_json: bool = False):
    if as_json:
        print(json.dumps([item.to_dict() for item in items], indent=2))
        return
    for item in items:
        print(item)


def _check_source(path: Path) -> bool:
    if not path.exists():
        print(f"File not found: {path}", file=sys.stderr)
        return False
    return True


def cmd_parse(args):
    """Parse a file and show its checklist items without changing it."""
    path = Path(args.file)
    if not _check_source(path):
        return EXIT_NOT_FOUND

    try:
        items = parse_lines(path.read_text(encoding="utf-8"), list_name=args.list)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to process file: {e}", file=sys.stderr)
        return EXIT_FAILED

    if not items:
        print(f"No reminders found in file: {path}")
        return EXIT_OK

    _print_items(items, as_json=args.json)
    if not args.json:
        print("\nNote: File was only parsed, not modified. Use 'sync' to update the file.")
    return EXIT_OK


def cmd_sync(args):
    """Sync a file with Apple Reminders and rewrite it."""
    path = Path(args.file)
    if not _check_source(path):
        return EXIT_NOT_FOUND

    try:
        sync_log = SyncLog()
    except (OSError, sqlite3.Error) as e:
        print(f"Warning: sync log unavailable, continuing without it: {e}", file=sys.stderr)
        sync_log = None

    engine = SyncEngine(AppleReminders(), sync_log=sync_log)

    try:
        written = engine.rewrite_file(path, destination=args.output, list_name=args.list)
        items = parse_lines(written.read_text(encoding="utf-8"), list_name=args.list)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to process file: {e}", file=sys.stderr)
        return EXIT_FAILED

    print(f"File has been rewritten: {written}")
    print()
    print(engine.last_result.summary())

    if items:
        print("\nReminders in the rewritten file:")
        _print_items(items)

    return EXIT_OK


def cmd_status(args):
    """Show recent sync activity."""
    try:
        sync_log = SyncLog()
        stats = sync_log.get_stats()
        logs = sync_log.get_recent_logs(args.limit)
    except (OSError, sqlite3.Error) as e:
        print(f"Failed to read sync log: {e}", file=sys.stderr)
        return EXIT_FAILED

    print("\n=== Sync Status ===\n")
    for key, value in stats.items():
        print(f"  {key}: {value}")

    if logs:
        print("\nRecent Activity:")
        for log in logs:
            outcomes = (log["details"] or {}).get("outcomes", {})
            counts = ", ".join(f"{k}={v}" for k, v in outcomes.items() if v)
            print(f"  [{log['timestamp']}] {log['action']} {log['document'] or ''} {counts}".rstrip())

    return EXIT_OK


def cmd_test(args):
    """Test access to Apple Reminders."""
    print("\n=== Connection Test ===\n")
    print("Testing Apple Reminders...")

    apple = AppleReminders()
    if not apple.request_access():
        print("  ✗ Access denied.")
        return EXIT_FAILED

    print("  ✓ Access granted.")
    return EXIT_OK


def cmd_config(args):
    """Show current configuration."""
    config.print_config()
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remindian",
        description="Sync Markdown checklists with Apple Reminders",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Checklist lines look like:  - [ ] Task text  %% optional comment %%

Examples:
  # Show the checklist items of a note
  remindian parse notes/today.md

  # Sync a note into the "work" list, rewriting it in place
  remindian sync --list work notes/today.md

  # Write the synced note somewhere else
  remindian sync --output /tmp/today.md notes/today.md
"""
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_help = f"Reminder list for new items (default: {config.DEFAULT_LIST})"

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Show checklist items without changing the file")
    parse_parser.add_argument("file", help="Markdown file")
    parse_parser.add_argument("--list", default=config.DEFAULT_LIST, help=list_help)
    parse_parser.add_argument("--json", action="store_true", help="Print items as JSON")

    # sync command
    sync_parser = subparsers.add_parser("sync", help="Sync a file with Apple Reminders")
    sync_parser.add_argument("file", help="Markdown file")
    sync_parser.add_argument("--list", default=config.DEFAULT_LIST, help=list_help)
    sync_parser.add_argument(
        "--output", "-o",
        help="Write to this file instead of rewriting the original"
    )

    # status command
    status_parser = subparsers.add_parser("status", help="Show recent sync activity")
    status_parser.add_argument("--limit", type=int, default=5, help="Number of entries to show")

    # test command
    subparsers.add_parser("test", help="Test access to Apple Reminders")

    # config command
    subparsers.add_parser("config", help="Show current configuration")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on usage errors; 2 means "file not found" here
        sys.exit(EXIT_USAGE if e.code else EXIT_OK)

    configure_logging(args.verbose)

    # Dispatch to command handler
    commands = {
        "parse": cmd_parse,
        "sync": cmd_sync,
        "status": cmd_status,
        "test": cmd_test,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler:
        sys.exit(handler(args))
    else:
        parser.print_help()
        sys.exit(EXIT_USAGE)


if __name__ == "__main__":
    main()
