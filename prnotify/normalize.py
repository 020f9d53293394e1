"""Conversion of raw GitHub records into the domain model."""

from __future__ import annotations

import re

from prnotify.connectors.github_gh import GithubComment, GithubIssue, GithubReview, GithubReviewState
from prnotify.errors import SourceDataError
from prnotify.models import Comment, PullRequestActivity, Review, ReviewState

_PULL_URL_RE = re.compile(r"https://[^/]+/(?P<owner>[^/]+)/(?P<name>[^/]+)/pull/\d+")

_REVIEW_STATES = {
    GithubReviewState.COMMENTED: ReviewState.COMMENTED,
    GithubReviewState.APPROVED: ReviewState.APPROVED,
    GithubReviewState.CHANGES_REQUESTED: ReviewState.CHANGES_REQUESTED,
}


def parse_repo_coordinates(url: str) -> tuple[str, str]:
    m = _PULL_URL_RE.search(url)
    if not m:
        raise SourceDataError(f"Invalid pull request url: {url}")
    return m.group("owner"), m.group("name")


def pull_request_from_issue(issue: GithubIssue) -> PullRequestActivity:
    owner, name = parse_repo_coordinates(issue.html_url)
    return PullRequestActivity(
        id=issue.id,
        number=issue.number,
        title=issue.title,
        author=issue.user.login,
        url=issue.html_url,
        repo_owner=owner,
        repo_name=name,
    )


def comment_from_record(record: GithubComment, pull_request_url: str) -> Comment:
    return Comment(
        author=record.user.login,
        body=record.body or "",
        pull_request_url=pull_request_url,
        comment_url=record.html_url,
    )


def review_from_record(record: GithubReview, pull_request_url: str) -> Review:
    state = _REVIEW_STATES.get(record.state)
    if state is None:
        # Pending and dismissed reviews are dropped by the noise filter first.
        raise SourceDataError(f"Review {record.id} has non-visible state {record.state.value}")
    return Review(
        author=record.user.login,
        state=state,
        body=record.body or None,
        pull_request_url=pull_request_url,
        review_url=record.html_url,
    )
