import gc
import sqlite3

import pytest

from pitchperfect_core.errors import ConfigurationError
from pitchperfect_core.sync import SyncCoordinator
from pitchperfect_store.base import PLAYERS, TEAMS, watch_all
from pitchperfect_store.sqlite import SqliteRowStore


@pytest.fixture
def store(tmp_path):
    s = SqliteRowStore(tmp_path / "portal.db")
    yield s
    s.close()


def test_missing_path_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        SqliteRowStore(None)
    with pytest.raises(ConfigurationError):
        SqliteRowStore("")


def test_upsert_fetch_and_delete_round_trip(store):
    store.upsert(TEAMS, "U10 Reds", {"id": "U10 Reds", "name": "U10 Reds"})
    store.upsert(TEAMS, "U10 Reds", {"id": "U10 Reds", "name": "Reds"})
    assert store.fetch(TEAMS) == [{"id": "U10 Reds", "name": "Reds"}]
    store.delete(TEAMS, "U10 Reds")
    assert store.fetch(TEAMS) == []


def test_settings(store):
    assert store.fetch_setting("team_logo") is None
    store.upsert_setting("team_logo", "a.png")
    store.upsert_setting("team_logo", "b.png")
    assert store.fetch_setting("team_logo") == "b.png"


def test_unknown_collection_rejected(store):
    with pytest.raises(ValueError):
        store.fetch("fixtures")


def test_notifications_follow_writes(store):
    seen = []
    unsubscribe = store.subscribe(watch_all, seen.append)
    store.upsert(PLAYERS, "p1", {"id": "p1", "name": "Luke"})
    store.upsert_setting("team_logo", "x.png")
    unsubscribe()
    store.delete(PLAYERS, "p1")
    assert [(n.collection, n.event, n.record_id) for n in seen] == [
        ("players", "upsert", "p1"),
        ("settings", "upsert", "team_logo"),
    ]


def test_reopening_keeps_data_and_adds_updated_at(tmp_path):
    path = tmp_path / "legacy.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE players (id TEXT PRIMARY KEY, data TEXT NOT NULL)")
    conn.execute("INSERT INTO players(id, data) VALUES ('p1', '{\"id\": \"p1\", \"name\": \"Luke\"}')")
    conn.commit()
    conn.close()

    store = SqliteRowStore(path)
    try:
        columns = {row["name"] for row in store.query_all("PRAGMA table_info(players)")}
        assert "updated_at" in columns
        assert store.fetch(PLAYERS) == [{"id": "p1", "name": "Luke"}]
    finally:
        store.close()


def test_coordinator_over_sqlite(store):
    coord = SyncCoordinator(store)
    report = coord.initial_load()
    assert set(report.used_fallback) == {"players", "coaches", "teams"}
    luke = coord.get_player("p1").model_copy(update={"position": "Striker"})
    assert coord.apply_optimistic_update(luke).ok
    rows = store.fetch(PLAYERS)
    assert rows[0]["position"] == "Striker"
    assert rows[0]["schemaVersion"] == 2


def test_abandoned_coordinators_stop_receiving_changes(store, monkeypatch):
    refetched = []
    monkeypatch.setattr(SyncCoordinator, "refetch", lambda self: refetched.append(self))
    coordinators = [SyncCoordinator(store) for _ in range(5)]
    for coordinator in coordinators:
        coordinator.start_realtime()
    assert len(store.feed) == 5

    del coordinators, coordinator
    gc.collect()
    store.upsert(TEAMS, "U10 Reds", {"id": "U10 Reds", "name": "U10 Reds"})

    assert refetched == []
    assert len(store.feed) == 0


def test_stop_realtime_unsubscribes(store):
    coordinator = SyncCoordinator(store)
    coordinator.start_realtime()
    coordinator.start_realtime()
    assert len(store.feed) == 1
    coordinator.stop_realtime()
    assert len(store.feed) == 0
