"""Core Pydantic domain models for prnotify."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer


class ReviewState(str, Enum):
    COMMENTED = "COMMENTED"
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"


class Classification(str, Enum):
    NEW = "new"
    EXISTING = "existing"


class NotificationKind(str, Enum):
    PULL_REQUEST = "pull_request"
    COMMENT = "comment"
    REVIEW = "review"


class RunPhase(str, Enum):
    IDLE = "idle"
    LOADING_SNAPSHOT = "loading_snapshot"
    FETCHING = "fetching"
    DIFFING = "diffing"
    NOTIFYING = "notifying"
    DONE = "done"
    FAILED = "failed"


class Comment(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    author: str
    body: str
    pull_request_url: str
    comment_url: str


class Review(BaseModel):
    """A submitted review; ``attached_comments`` only grows during assembly."""

    model_config = ConfigDict(extra="forbid")

    author: str
    state: ReviewState
    body: str | None = None
    attached_comments: list[str] = Field(default_factory=list)
    pull_request_url: str
    review_url: str

    def add_comment(self, body: str) -> None:
        self.attached_comments.append(body)


class PullRequestActivity(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    number: int
    title: str
    author: str
    url: str
    repo_owner: str
    repo_name: str
    reviews: dict[int, Review] = Field(default_factory=dict)
    comments: dict[int, Comment] = Field(default_factory=dict)

    @property
    def repo(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"


class PullRequestSnapshot(BaseModel):
    """Identifiers already notified about for one pull request.

    Serialized as ``{"reviews": [...], "comments": [...]}`` with sorted ids.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    review_ids: set[int] = Field(default_factory=set, alias="reviews")
    comment_ids: set[int] = Field(default_factory=set, alias="comments")

    @field_serializer("review_ids", "comment_ids")
    def _sorted_ids(self, value: set[int]) -> list[int]:
        return sorted(value)


Snapshot = dict[int, PullRequestSnapshot]
SNAPSHOT_ADAPTER: TypeAdapter[Snapshot] = TypeAdapter(Snapshot)


def snapshot_to_json(snapshot: Snapshot) -> dict[str, Any]:
    return {str(pr_id): snapshot[pr_id].model_dump(mode="json", by_alias=True) for pr_id in sorted(snapshot)}


class PullRequestDiff(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pull_request_id: int
    classification: Classification
    new_comment_ids: list[int] = Field(default_factory=list)
    new_review_ids: list[int] = Field(default_factory=list)

    @property
    def is_new(self) -> bool:
        return self.classification == Classification.NEW


class NotificationAction(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    label: str
    url: str


class Notification(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pull_request_id: int
    kind: NotificationKind
    item_id: int | None = None
    title: str
    body: str
    actions: list[NotificationAction] = Field(default_factory=list)


class PullRequestFailure(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pull_request_id: int
    url: str
    error: str


class ReconcileReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    snapshot: Snapshot = Field(default_factory=dict)
    notifications: list[Notification] = Field(default_factory=list)
    processed_pull_requests: int = 0
    new_pull_requests: int = 0
    skipped_pull_requests: list[PullRequestFailure] = Field(default_factory=list)
    snapshot_substituted: bool = False

    @property
    def notification_count(self) -> int:
        return len(self.notifications)
