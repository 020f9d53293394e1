"""Inspect the stored snapshot."""

from __future__ import annotations

import argparse
import json

from prnotify.commands.common import CommandRuntime, load_config
from prnotify.errors import SnapshotNotFoundError
from prnotify.models import snapshot_to_json


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    path = args.path or load_config(args).cache.path
    store = runtime.store_cls(path)
    try:
        snapshot = store.load()
    except SnapshotNotFoundError:
        print(f"No snapshot at {path}")
        return 1

    if args.json:
        payload = {"path": str(path), "pull_requests": len(snapshot), "snapshot": snapshot_to_json(snapshot)}
        print(json.dumps(payload, indent=2))
        return 0

    print(f"Snapshot: {path}")
    print(f"Pull requests: {len(snapshot)}")
    for pr_id in sorted(snapshot):
        entry = snapshot[pr_id]
        print(f"  {pr_id}: reviews={len(entry.review_ids)} comments={len(entry.comment_ids)}")
    return 0
