"""Attach review-thread comments to their parent reviews."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from prnotify.connectors.github_gh import GithubReviewComment
from prnotify.models import Review

logger = logging.getLogger(__name__)


def attach_review_comments(reviews: dict[int, Review], review_comments: Iterable[GithubReviewComment]) -> dict[int, Review]:
    """Append each comment body to its parent review, in arrival order.

    Comments whose parent review is absent (filtered out, or not part of this
    pull request) are dropped.
    """
    dropped = 0
    for comment in review_comments:
        parent = reviews.get(comment.pull_request_review_id) if comment.pull_request_review_id is not None else None
        if parent is None:
            dropped += 1
            continue
        parent.add_comment(comment.body or "")
    if dropped:
        logger.debug("Dropped %s review comments without a surviving parent review", dropped)
    return reviews
