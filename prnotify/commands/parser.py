"""CLI parser construction."""

from __future__ import annotations

import argparse

from prnotify.commands.common import add_common_config_flags


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prnotify", description="Push notifications for pull request activity")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", aliases=["notify"], help="Notify about activity new since the last run")
    run.add_argument(
        "--query",
        action="append",
        help="Search query for pull requests (repeatable; replaces github.queries)",
    )
    run.add_argument(
        "--dry-run",
        action="store_true",
        help="Log notifications instead of sending them and leave the snapshot untouched",
    )
    add_common_config_flags(run)

    snapshot = sub.add_parser("snapshot", aliases=["show-snapshot"], help="Show the stored snapshot")
    snapshot.add_argument("--path", help="Snapshot file (default: cache.path from config)")
    snapshot.add_argument("--json", action="store_true", help="Emit machine-readable JSON")
    add_common_config_flags(snapshot)

    return parser
