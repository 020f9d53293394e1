"""Error taxonomy for reconciliation runs.

Every failure raised while reconciling is mapped to exactly one
``FailureScope``: abort the whole run, skip the affected pull request and
continue, or substitute a default value and continue.
"""

from __future__ import annotations

from enum import Enum


class FailureScope(str, Enum):
    ABORT_RUN = "abort_run"
    SKIP_PULL_REQUEST = "skip_pull_request"
    SUBSTITUTE_DEFAULT = "substitute_default"


class FailurePolicy(str, Enum):
    """How remote fetch and notification failures are scoped."""

    ABORT_RUN = "abort_run"
    SKIP_PULL_REQUEST = "skip_pull_request"


class PrnotifyError(RuntimeError):
    pass


class SourceDataError(PrnotifyError):
    """Remote data does not have the shape reconciliation relies on."""


class SourceFetchError(PrnotifyError):
    """The activity source failed to return a page of records."""


class NotificationError(PrnotifyError):
    """A notification could not be delivered."""


class SnapshotLoadError(PrnotifyError):
    pass


class SnapshotNotFoundError(SnapshotLoadError):
    pass


class SnapshotCorruptError(SnapshotLoadError):
    pass


class CookieExtractionError(PrnotifyError):
    pass


def classify_failure(exc: BaseException, policy: FailurePolicy = FailurePolicy.ABORT_RUN) -> FailureScope:
    if isinstance(exc, SnapshotLoadError):
        return FailureScope.SUBSTITUTE_DEFAULT
    if isinstance(exc, (SourceFetchError, NotificationError)) and policy == FailurePolicy.SKIP_PULL_REQUEST:
        return FailureScope.SKIP_PULL_REQUEST
    return FailureScope.ABORT_RUN
