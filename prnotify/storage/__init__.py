"""Snapshot persistence backends."""

from .json_file import JsonSnapshotStore

__all__ = ["JsonSnapshotStore"]
