"""Noise filtering for self-authored and pattern-excluded activity."""

from __future__ import annotations

import re
from collections.abc import Iterable

from prnotify.connectors.github_gh import GithubComment, GithubReview, GithubReviewState

# Reviews in these states are never visible activity.
HIDDEN_REVIEW_STATES = frozenset({GithubReviewState.PENDING, GithubReviewState.DISMISSED})


class NoiseFilter:
    """Drops activity authored by ``username`` or whose body matches an exclude pattern."""

    def __init__(self, username: str, exclude_patterns: Iterable[str] = ()) -> None:
        self.username = username
        self.patterns = [re.compile(pattern) for pattern in exclude_patterns]

    def is_noise(self, author: str, body: str | None) -> bool:
        if author == self.username:
            return True
        text = body or ""
        return any(pattern.search(text) for pattern in self.patterns)

    def keep_comment(self, record: GithubComment) -> bool:
        return not self.is_noise(record.user.login, record.body)

    def keep_review(self, record: GithubReview) -> bool:
        if record.state in HIDDEN_REVIEW_STATES:
            return False
        return not self.is_noise(record.user.login, record.body)

    def filter_comments(self, records: Iterable[GithubComment]) -> list[GithubComment]:
        return [record for record in records if self.keep_comment(record)]

    def filter_reviews(self, records: Iterable[GithubReview]) -> list[GithubReview]:
        return [record for record in records if self.keep_review(record)]
