import json
from pathlib import Path

import pytest

from prnotify.errors import SnapshotCorruptError, SnapshotNotFoundError
from prnotify.models import PullRequestSnapshot
from prnotify.storage import JsonSnapshotStore


def test_save_then_load_round_trips_id_sets(tmp_path: Path) -> None:
    store = JsonSnapshotStore(tmp_path / "nested" / "cache.json")
    snapshot = {
        101: PullRequestSnapshot(review_ids={9, 3}, comment_ids={5, 6}),
        7: PullRequestSnapshot(),
    }

    store.save(snapshot)
    loaded = store.load()

    assert set(loaded) == {101, 7}
    assert loaded[101].review_ids == {3, 9}
    assert loaded[101].comment_ids == {5, 6}
    assert loaded[7].review_ids == set()
    assert loaded == snapshot


def test_file_layout_is_sorted_json(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    JsonSnapshotStore(path).save({101: PullRequestSnapshot(review_ids={9}, comment_ids={6, 5})})

    assert json.loads(path.read_text()) == {"101": {"reviews": [9], "comments": [5, 6]}}
    assert list(tmp_path.iterdir()) == [path]


def test_loads_snapshot_written_by_earlier_versions(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text('{"101": {"reviews": [], "comments": [5]}, "202": {"reviews": [1, 2], "comments": []}}')

    loaded = JsonSnapshotStore(path).load()

    assert loaded[101].comment_ids == {5}
    assert loaded[202].review_ids == {1, 2}


def test_missing_snapshot_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(SnapshotNotFoundError):
        JsonSnapshotStore(tmp_path / "absent.json").load()


@pytest.mark.parametrize(
    "content",
    [
        b"{not json",
        b"[1, 2, 3]",
        b'{"abc": {"reviews": [], "comments": []}}',
        b'{"101": {"reviews": ["x"], "comments": []}}',
        b'{"101": {"reviews": [], "comments": [], "extra": 1}}',
        b"\xff\xfe garbage",
    ],
)
def test_corrupt_snapshot_raises_corrupt(tmp_path: Path, content: bytes) -> None:
    path = tmp_path / "cache.json"
    path.write_bytes(content)

    with pytest.raises(SnapshotCorruptError):
        JsonSnapshotStore(path).load()


def test_save_replaces_previous_snapshot(tmp_path: Path) -> None:
    store = JsonSnapshotStore(tmp_path / "cache.json")
    store.save({1: PullRequestSnapshot(comment_ids={1})})
    store.save({2: PullRequestSnapshot(comment_ids={2})})

    assert set(store.load()) == {2}
