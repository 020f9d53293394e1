"""Snapshot store interface."""

from __future__ import annotations

from typing import Protocol

from prnotify.models import Snapshot


class SnapshotStore(Protocol):
    def load(self) -> Snapshot:
        """Return the stored snapshot.

        Raises ``SnapshotNotFoundError`` or ``SnapshotCorruptError``; callers
        decide whether to substitute an empty snapshot.
        """
        ...

    def save(self, snapshot: Snapshot) -> None: ...
