"""Snapshot diffing: which pull requests and items are new since the last run."""

from __future__ import annotations

from collections.abc import Mapping

from prnotify.models import Classification, Comment, PullRequestDiff, PullRequestSnapshot, Review, Snapshot


def diff_pull_request(
    previous: Snapshot,
    pull_request_id: int,
    current_reviews: Mapping[int, Review],
    current_comments: Mapping[int, Comment],
) -> PullRequestDiff:
    seen = previous.get(pull_request_id)
    if seen is None:
        # The single "new pull request" event covers all current content.
        return PullRequestDiff(pull_request_id=pull_request_id, classification=Classification.NEW)

    return PullRequestDiff(
        pull_request_id=pull_request_id,
        classification=Classification.EXISTING,
        new_comment_ids=sorted(set(current_comments) - seen.comment_ids),
        new_review_ids=sorted(set(current_reviews) - seen.review_ids),
    )


def snapshot_entry(current_reviews: Mapping[int, Review], current_comments: Mapping[int, Comment]) -> PullRequestSnapshot:
    return PullRequestSnapshot(review_ids=set(current_reviews), comment_ids=set(current_comments))
