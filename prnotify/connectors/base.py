"""Connector interfaces for the activity source and notification sink."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from prnotify.connectors.github_gh import GithubComment, GithubIssue, GithubReview, GithubReviewComment


class ActivitySource(Protocol):
    """Remote pull request activity. Every list is complete and order-preserving."""

    def search_pull_requests(self, query: str) -> list[GithubIssue]: ...

    def list_issue_comments(self, repo: str, pr_number: int) -> list[GithubComment]: ...

    def list_reviews(self, repo: str, pr_number: int) -> list[GithubReview]: ...

    def list_review_comments(self, repo: str, pr_number: int) -> list[GithubReviewComment]: ...


class NotificationSink(Protocol):
    def send(self, title: str, body: str, actions: Sequence[tuple[str, str]] = ()) -> None: ...
