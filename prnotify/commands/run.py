"""One-shot reconciliation command."""

from __future__ import annotations

import argparse
import logging

from prnotify.commands.common import CommandRuntime, build_sink, build_source, load_config
from prnotify.pipeline import ReconcileEngine

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace, *, runtime: CommandRuntime) -> int:
    config = load_config(args)
    queries = args.query or config.github.queries

    source = build_source(config, runtime=runtime)
    sink = build_sink(config, runtime=runtime, dry_run=args.dry_run)
    store = runtime.store_cls(config.cache.path)

    engine = ReconcileEngine.from_config(config, source, sink, store=store)
    report = engine.run(queries, persist=not args.dry_run)

    if report.skipped_pull_requests:
        logger.warning(
            "Skipped %s pull requests: %s",
            len(report.skipped_pull_requests),
            ", ".join(failure.url for failure in report.skipped_pull_requests),
        )
        return 2
    logger.info("Sent %s notifications", report.notification_count)
    return 0
