"""Typed command runtime dependency container."""

from __future__ import annotations

from dataclasses import dataclass

from prnotify.services.interfaces import (
    CookieExtractor,
    SinkConnectorFactory,
    SnapshotStoreFactory,
    SourceConnectorFactory,
)


@dataclass(frozen=True)
class CommandRuntime:
    source_connector_cls: SourceConnectorFactory
    sink_connector_cls: SinkConnectorFactory
    store_cls: SnapshotStoreFactory
    cookie_extractor: CookieExtractor


def default_runtime() -> CommandRuntime:
    from prnotify.connectors import GithubGhSourceConnector, NtfySinkConnector
    from prnotify.cookies import extract_cookies
    from prnotify.storage import JsonSnapshotStore

    return CommandRuntime(
        source_connector_cls=GithubGhSourceConnector,
        sink_connector_cls=NtfySinkConnector,
        store_cls=JsonSnapshotStore,
        cookie_extractor=extract_cookies,
    )
