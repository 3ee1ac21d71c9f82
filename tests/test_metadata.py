# File: tests/test_metadata.py
from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from docsweep.crawler.checkpoint import CheckpointManager
from docsweep.crawler.frontier import Frontier
from docsweep.crawler.metadata import MetadataStore
from docsweep.crawler.models import QueuedURL, SessionCheckpoint
from helpers import BASE


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def store(tmp_path) -> MetadataStore:
    return MetadataStore.open(tmp_path / "docs" / "metadata.json")


def _fingerprint(store: MetadataStore, url: str = f"{BASE}/kit") -> None:
    store.update_fingerprint(
        url,
        category="kit",
        storage_path="docs/kit/documentation_kit.md",
        content_hash="abc",
        depth=0,
    )


# --------------------------------------------------------------------------- #
#                               MetadataStore                                 #
# --------------------------------------------------------------------------- #


def test_missing_file_starts_empty(store):
    assert dict(store.fingerprints) == {}
    assert store.checkpoint is None
    assert store.stats.total_pages == 0
    assert not store.path.exists()


def test_corrupt_file_starts_fresh(tmp_path, caplog):
    path = tmp_path / "metadata.json"
    path.write_text("{not json", encoding="utf-8")
    caplog.set_level("WARNING", logger="DocSweep")

    store = MetadataStore.open(path)

    assert dict(store.fingerprints) == {}
    assert "starting fresh" in caplog.text


def test_wrong_shape_starts_fresh(tmp_path):
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps({"fingerprints": {"x": {"url": "x"}}}), encoding="utf-8")
    assert dict(MetadataStore.open(path).fingerprints) == {}


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps({"fingerprints": {}, "schema": 3}), encoding="utf-8")
    assert MetadataStore.open(path).data.fingerprints == {}


def test_mutations_stay_in_memory_until_save(store):
    _fingerprint(store)
    assert not store.path.exists()

    store.save()
    again = MetadataStore.open(store.path)
    assert again.get_fingerprint(f"{BASE}/kit").content_hash == "abc"


def test_save_round_trips_everything(store):
    _fingerprint(store)
    _fingerprint(store, f"{BASE}/other/page")
    store.reset_stats(started_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    store.update_stats(lambda s: setattr(s, "new_pages", 2))
    store.set_checkpoint(
        SessionCheckpoint(
            visited={f"{BASE}/kit", f"{BASE}/a"},
            pending_queue=[QueuedURL(url=f"{BASE}/b", depth=1)],
            start_url=f"{BASE}/kit",
            output_directory="docs",
        )
    )
    store.save()

    loaded = MetadataStore.open(store.path)
    assert loaded.data.model_dump() == store.data.model_dump()
    assert loaded.has_active_session()
    assert loaded.categories() == {"kit": 2}


def test_visited_is_stored_sorted(store):
    store.set_checkpoint(
        SessionCheckpoint(visited={"b", "c", "a"}, start_url="s", output_directory="docs")
    )
    store.save()
    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert raw["checkpoint"]["visited"] == ["a", "b", "c"]


def test_save_leaves_no_temporary_files(store):
    for n in range(3):
        _fingerprint(store, f"{BASE}/p{n}")
        store.save()
    assert [p.name for p in store.path.parent.iterdir()] == ["metadata.json"]


def test_snapshot_stats_is_detached(store):
    snap = store.snapshot_stats()
    store.update_stats(lambda s: setattr(s, "errors", 5))
    assert snap.errors == 0
    assert store.stats.errors == 5


def test_finalize_stamps_end_time(store):
    store.reset_stats()
    stats = store.finalize()
    assert stats.finished_at is not None
    assert store.data.last_crawl_at == stats.finished_at
    assert stats.duration is not None and stats.duration >= 0


# --------------------------------------------------------------------------- #
#                             CheckpointManager                               #
# --------------------------------------------------------------------------- #


def _manager(store, clock, interval=30.0):
    return CheckpointManager(
        store, start_url=f"{BASE}/kit", output_directory="docs", interval=interval, clock=clock
    )


def _frontier() -> Frontier:
    f = Frontier(("https://docs.example.com",), max_depth=3)
    f.seed(f"{BASE}/kit")
    return f


def test_save_if_due_waits_for_interval(store):
    clock = FakeClock()
    manager = _manager(store, clock)
    frontier = _frontier()

    clock.now = 10
    assert not manager.save_if_due(frontier)
    assert not store.path.exists()
    # the in-memory copy is always current
    assert store.checkpoint.pending_queue == [QueuedURL(url=f"{BASE}/kit", depth=0)]

    clock.now = 31
    assert manager.save_if_due(frontier)
    assert store.path.exists()

    clock.now = 40
    assert not manager.save_if_due(frontier)


def test_zero_interval_saves_every_time(store):
    clock = FakeClock()
    manager = _manager(store, clock, interval=0)
    assert manager.save_if_due(_frontier())
    assert manager.save_if_due(_frontier())


def test_restore_only_from_active_checkpoint(store):
    manager = _manager(store, FakeClock())
    assert not manager.restore(_frontier())

    store.set_checkpoint(
        SessionCheckpoint(
            visited={f"{BASE}/kit"},
            pending_queue=[QueuedURL(url=f"{BASE}/a", depth=1)],
            start_url=f"{BASE}/kit",
            output_directory="docs",
            active=False,
        )
    )
    assert not manager.restore(_frontier())


def test_restore_seeds_frontier_and_keeps_session_start(store):
    started = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    store.set_checkpoint(
        SessionCheckpoint(
            visited={f"{BASE}/kit"},
            pending_queue=[QueuedURL(url=f"{BASE}/a", depth=1)],
            start_url=f"{BASE}/kit",
            output_directory="docs",
            session_started_at=started,
        )
    )
    manager = _manager(store, FakeClock())
    frontier = Frontier(("https://docs.example.com",), max_depth=3)

    assert manager.restore(frontier)
    assert frontier.visited == {f"{BASE}/kit"}
    assert [q.url for q in frontier.pending()] == [f"{BASE}/a"]
    assert store.stats.started_at == started

    later = manager.snapshot(frontier)
    assert later.session_started_at == started


def test_complete_clears_checkpoint(store):
    manager = _manager(store, FakeClock())
    manager.save(_frontier())
    assert MetadataStore.open(store.path).has_active_session()

    assert manager.complete()
    assert MetadataStore.open(store.path).checkpoint is None


def test_failed_save_is_reported_not_raised(tmp_path, caplog):
    target = tmp_path / "metadata.json"
    target.mkdir()
    store = MetadataStore.open(target)
    manager = _manager(store, FakeClock(), interval=0)
    caplog.set_level("WARNING", logger="DocSweep")

    assert not manager.save(_frontier())
    assert not manager.complete()
    assert manager.failures == 2
    assert "Checkpoint save" in caplog.text
