"""Reconciliation driver: one batch run from remote activity to the next snapshot."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence

from prnotify.assembler import attach_review_comments
from prnotify.config import PrnotifyConfig
from prnotify.connectors.base import ActivitySource, NotificationSink
from prnotify.connectors.github_gh import GithubIssue
from prnotify.differ import diff_pull_request, snapshot_entry
from prnotify.errors import FailurePolicy, FailureScope, PrnotifyError, classify_failure
from prnotify.models import (
    Notification,
    PullRequestActivity,
    PullRequestFailure,
    ReconcileReport,
    RunPhase,
    Snapshot,
)
from prnotify.noise_filter import NoiseFilter
from prnotify.normalize import comment_from_record, pull_request_from_issue, review_from_record
from prnotify.notifications import build_notifications
from prnotify.storage.base import SnapshotStore

logger = logging.getLogger(__name__)


def dedupe_pull_requests(batches: Iterable[Iterable[GithubIssue]]) -> list[GithubIssue]:
    """Merge query results by pull request id; the first occurrence wins."""
    merged: dict[int, GithubIssue] = {}
    for batch in batches:
        for issue in batch:
            if issue.id in merged:
                continue
            merged[issue.id] = issue
    return list(merged.values())


class ReconcileEngine:
    def __init__(
        self,
        source: ActivitySource,
        sink: NotificationSink,
        *,
        username: str,
        exclude_patterns: Iterable[str] = (),
        store: SnapshotStore | None = None,
        failure_policy: FailurePolicy = FailurePolicy.ABORT_RUN,
    ) -> None:
        self.source = source
        self.sink = sink
        self.store = store
        self.noise = NoiseFilter(username, exclude_patterns)
        self.failure_policy = failure_policy
        self.phase = RunPhase.IDLE

    @classmethod
    def from_config(
        cls,
        config: PrnotifyConfig,
        source: ActivitySource,
        sink: NotificationSink,
        store: SnapshotStore | None = None,
    ) -> ReconcileEngine:
        return cls(
            source,
            sink,
            username=config.github.username,
            exclude_patterns=config.github.exclude_patterns,
            store=store,
            failure_policy=config.run.failure_policy,
        )

    def run(self, queries: Sequence[str], *, persist: bool = True) -> ReconcileReport:
        start = time.perf_counter()
        logger.info("Starting reconciliation for %s queries", len(queries))
        try:
            previous, substituted = self.load_snapshot()
            pull_requests = self.collect_pull_requests(queries)
            report = self.reconcile(previous, pull_requests)
            report.snapshot_substituted = substituted
            if persist and self.store is not None:
                self.store.save(report.snapshot)
                logger.debug("Saved snapshot with %s pull requests", len(report.snapshot))
            elif not persist:
                logger.info("Snapshot not persisted for this run")
        except PrnotifyError as exc:
            self._fail(exc)
            raise

        self.phase = RunPhase.DONE
        logger.info(
            "Reconciliation done: pull_requests=%s new=%s notifications=%s skipped=%s in %.2fs",
            report.processed_pull_requests,
            report.new_pull_requests,
            report.notification_count,
            len(report.skipped_pull_requests),
            time.perf_counter() - start,
        )
        return report

    def load_snapshot(self) -> tuple[Snapshot, bool]:
        """Return the previous snapshot and whether an empty one was substituted."""
        self.phase = RunPhase.LOADING_SNAPSHOT
        if self.store is None:
            return {}, True
        try:
            snapshot = self.store.load()
        except PrnotifyError as exc:
            if classify_failure(exc, self.failure_policy) != FailureScope.SUBSTITUTE_DEFAULT:
                raise
            logger.warning("Using an empty snapshot, every pull request counts as new: %s", exc)
            return {}, True
        logger.debug("Loaded snapshot with %s pull requests", len(snapshot))
        return snapshot, False

    def collect_pull_requests(self, queries: Sequence[str]) -> list[GithubIssue]:
        self.phase = RunPhase.FETCHING
        batches = [self.source.search_pull_requests(query) for query in queries]
        pull_requests = dedupe_pull_requests(batches)
        logger.info(
            "Found %s pull requests (%s before de-duplication)",
            len(pull_requests),
            sum(len(batch) for batch in batches),
        )
        return pull_requests

    def fetch_activity(self, issue: GithubIssue) -> PullRequestActivity:
        """Fetch, filter, normalize and assemble the activity of one pull request."""
        self.phase = RunPhase.FETCHING
        pull_request = pull_request_from_issue(issue)

        repo = pull_request.repo
        comment_records = self.source.list_issue_comments(repo, pull_request.number)
        review_records = self.source.list_reviews(repo, pull_request.number)
        review_comment_records = self.source.list_review_comments(repo, pull_request.number)

        pull_request.comments = {
            record.id: comment_from_record(record, pull_request.url)
            for record in self.noise.filter_comments(comment_records)
        }
        reviews = {
            record.id: review_from_record(record, pull_request.url)
            for record in self.noise.filter_reviews(review_records)
        }
        pull_request.reviews = attach_review_comments(reviews, review_comment_records)

        logger.debug(
            "Pull request %s: %s comments (%s excluded), %s reviews (%s excluded)",
            pull_request.url,
            len(pull_request.comments),
            len(comment_records) - len(pull_request.comments),
            len(pull_request.reviews),
            len(review_records) - len(pull_request.reviews),
        )
        return pull_request

    def reconcile(self, previous: Snapshot, pull_requests: Sequence[GithubIssue]) -> ReconcileReport:
        report = ReconcileReport()
        for issue in pull_requests:
            try:
                self._reconcile_one(previous, issue, report)
            except PrnotifyError as exc:
                if classify_failure(exc, self.failure_policy) != FailureScope.SKIP_PULL_REQUEST:
                    raise
                logger.warning("Skipping pull request %s: %s", issue.html_url, exc)
                report.skipped_pull_requests.append(PullRequestFailure(pull_request_id=issue.id, url=issue.html_url, error=str(exc)))
                # Keep the old baseline so the next run re-evaluates this pull request.
                if issue.id in previous:
                    report.snapshot[issue.id] = previous[issue.id]
        return report

    def _reconcile_one(self, previous: Snapshot, issue: GithubIssue, report: ReconcileReport) -> None:
        pull_request = self.fetch_activity(issue)

        self.phase = RunPhase.DIFFING
        diff = diff_pull_request(previous, pull_request.id, pull_request.reviews, pull_request.comments)

        self.phase = RunPhase.NOTIFYING
        for notification in build_notifications(pull_request, diff):
            self._send(notification)
            report.notifications.append(notification)

        report.snapshot[pull_request.id] = snapshot_entry(pull_request.reviews, pull_request.comments)
        report.processed_pull_requests += 1
        if diff.is_new:
            report.new_pull_requests += 1

    def _send(self, notification: Notification) -> None:
        logger.debug("Sending %s notification for pull request %s", notification.kind.value, notification.pull_request_id)
        self.sink.send(
            notification.title,
            notification.body,
            [(action.label, action.url) for action in notification.actions],
        )

    def _fail(self, exc: PrnotifyError) -> None:
        failed_in = self.phase
        self.phase = RunPhase.FAILED
        logger.error("Reconciliation failed while %s: %s", failed_in.value, exc)
