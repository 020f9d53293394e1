"""ntfy notification sink."""

from __future__ import annotations

import base64
import logging
import urllib.request
from collections.abc import Sequence

from prnotify.connectors.base import NotificationSink
from prnotify.errors import NotificationError

logger = logging.getLogger(__name__)


def _header_value(value: str) -> str:
    # Non-ASCII header values go out as RFC 2047 encoded-words, which ntfy decodes.
    try:
        value.encode("ascii")
    except UnicodeEncodeError:
        encoded = base64.b64encode(value.encode("utf-8")).decode("ascii")
        return f"=?utf-8?b?{encoded}?="
    return value


def format_actions(actions: Sequence[tuple[str, str]]) -> str:
    return " ".join(f"view, {label}, {url};" for label, url in actions)


class NtfySinkConnector(NotificationSink):
    def __init__(
        self,
        base_url: str,
        topic: str,
        *,
        timeout_seconds: float = 10.0,
        dry_run: bool = False,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.topic = topic
        self.timeout_seconds = timeout_seconds
        self.dry_run = dry_run
        self.sent: list[tuple[str, str, list[tuple[str, str]]]] = []

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.topic}"

    def send(self, title: str, body: str, actions: Sequence[tuple[str, str]] = ()) -> None:
        if self.dry_run:
            logger.info("[dry-run] %s: %s", title, body.replace("\n", " / "))
            self.sent.append((title, body, list(actions)))
            return

        headers = {"Title": _header_value(title)}
        if actions:
            headers["Actions"] = _header_value(format_actions(actions))

        req = urllib.request.Request(
            self.endpoint,
            data=body.encode("utf-8"),
            headers=headers,
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_seconds) as response:
                status = response.status
        except OSError as exc:
            raise NotificationError(f"ntfy delivery to {self.endpoint} failed: {exc}") from exc
        if status >= 300:
            raise NotificationError(f"ntfy delivery to {self.endpoint} returned HTTP {status}")
        self.sent.append((title, body, list(actions)))
