"""Notification payload formatting."""

from __future__ import annotations

from prnotify.models import (
    Comment,
    Notification,
    NotificationAction,
    NotificationKind,
    PullRequestActivity,
    PullRequestDiff,
    Review,
    ReviewState,
)

NEW_PULL_REQUEST_TITLE = "New Pull Request"
OPEN_PR_LABEL = "Open PR"
OPEN_COMMENT_LABEL = "Open Comment"

_REVIEW_VERBS = {
    ReviewState.APPROVED: "approved",
    ReviewState.CHANGES_REQUESTED: "requested changes",
    ReviewState.COMMENTED: "commented",
}


def format_comment(comment: Comment) -> str:
    return f"@{comment.author} commented:\n\n{comment.body}"


def format_review(review: Review) -> str:
    parts = [f"@{review.author} {_REVIEW_VERBS[review.state]}:"]
    if review.body:
        parts.append(review.body)
    elif len(review.attached_comments) == 1:
        # the only thread comment stands in for an empty review body
        parts.append(review.attached_comments[0])
    if len(review.attached_comments) > 1:
        parts.append(f"(+ {len(review.attached_comments)} comments)")
    return "\n\n".join(parts)


def _item_actions(pull_request_url: str, item_url: str) -> list[NotificationAction]:
    return [
        NotificationAction(label=OPEN_PR_LABEL, url=pull_request_url),
        NotificationAction(label=OPEN_COMMENT_LABEL, url=item_url),
    ]


def build_notifications(pull_request: PullRequestActivity, diff: PullRequestDiff) -> list[Notification]:
    """Translate a diff into notifications: comments first, then reviews, ascending ids."""
    if diff.is_new:
        return [
            Notification(
                pull_request_id=pull_request.id,
                kind=NotificationKind.PULL_REQUEST,
                title=NEW_PULL_REQUEST_TITLE,
                body=f"@{pull_request.author} opened {pull_request.title}",
                actions=[NotificationAction(label=OPEN_PR_LABEL, url=pull_request.url)],
            )
        ]

    notifications: list[Notification] = []
    for comment_id in diff.new_comment_ids:
        comment = pull_request.comments[comment_id]
        notifications.append(
            Notification(
                pull_request_id=pull_request.id,
                kind=NotificationKind.COMMENT,
                item_id=comment_id,
                title=pull_request.title,
                body=format_comment(comment),
                actions=_item_actions(comment.pull_request_url, comment.comment_url),
            )
        )
    for review_id in diff.new_review_ids:
        review = pull_request.reviews[review_id]
        notifications.append(
            Notification(
                pull_request_id=pull_request.id,
                kind=NotificationKind.REVIEW,
                item_id=review_id,
                title=pull_request.title,
                body=format_review(review),
                actions=_item_actions(review.pull_request_url, review.review_url),
            )
        )
    return notifications
