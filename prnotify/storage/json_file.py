"""JSON file snapshot store."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from prnotify.errors import SnapshotCorruptError, SnapshotNotFoundError
from prnotify.models import SNAPSHOT_ADAPTER, Snapshot, snapshot_to_json


class JsonSnapshotStore:
    """Keeps the snapshot as one JSON object keyed by pull request id.

    Writes go to a sibling temporary file that replaces the target, so a
    reader never observes a half-written snapshot.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Snapshot:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise SnapshotNotFoundError(f"No snapshot at {self.path}") from exc
        except OSError as exc:
            raise SnapshotCorruptError(f"Could not read snapshot {self.path}: {exc}") from exc

        try:
            return SNAPSHOT_ADAPTER.validate_python(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise SnapshotCorruptError(f"Snapshot {self.path} is not valid: {exc}") from exc

    def save(self, snapshot: Snapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(snapshot_to_json(snapshot), indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
