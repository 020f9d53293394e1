"""Factory interfaces used by command/runtime orchestration."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from prnotify.connectors.base import ActivitySource, NotificationSink
from prnotify.storage.base import SnapshotStore


class SourceConnectorFactory(Protocol):
    def __call__(
        self,
        hostname: str = "github.com",
        gh_bin: str = "gh",
        *,
        token: str | None = None,
        cookie: str | None = None,
    ) -> ActivitySource: ...


class SinkConnectorFactory(Protocol):
    def __call__(
        self,
        base_url: str,
        topic: str,
        *,
        timeout_seconds: float = 10.0,
        dry_run: bool = False,
    ) -> NotificationSink: ...


class SnapshotStoreFactory(Protocol):
    def __call__(self, path: str | Path) -> SnapshotStore: ...


class CookieExtractor(Protocol):
    def __call__(self, cookies_file_path: str | Path, hostname: str) -> str: ...
