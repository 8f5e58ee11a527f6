from __future__ import annotations

import copy
import threading
from typing import Any

from .base import (
    ENTITY_COLLECTIONS,
    SETTINGS,
    Callback,
    ChangeFeed,
    ChangeNotification,
    Predicate,
    Unsubscribe,
    check_collection,
)


class InMemoryRowStore:
    """Row store held in a dict, used for demos and tests.

    Records are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self, seed: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self._lock = threading.RLock()
        self._tables: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in ENTITY_COLLECTIONS}
        self._settings: dict[str, str] = {}
        self.feed = ChangeFeed()
        for collection, rows in (seed or {}).items():
            check_collection(collection)
            for row in rows:
                self._tables[collection][str(row["id"])] = copy.deepcopy(row)

    def ping(self) -> None:
        return None

    def fetch(self, collection: str) -> list[dict[str, Any]]:
        check_collection(collection)
        with self._lock:
            return [copy.deepcopy(row) for row in self._tables[collection].values()]

    def upsert(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        check_collection(collection)
        with self._lock:
            self._tables[collection][str(record_id)] = copy.deepcopy(data)
        self.feed.publish(ChangeNotification(collection, "upsert", str(record_id)))

    def delete(self, collection: str, record_id: str) -> None:
        check_collection(collection)
        with self._lock:
            self._tables[collection].pop(str(record_id), None)
        self.feed.publish(ChangeNotification(collection, "delete", str(record_id)))

    def fetch_setting(self, key: str) -> str | None:
        with self._lock:
            return self._settings.get(key)

    def upsert_setting(self, key: str, value: str) -> None:
        with self._lock:
            self._settings[key] = value
        self.feed.publish(ChangeNotification(SETTINGS, "upsert", key))

    def subscribe(self, predicate: Predicate, callback: Callback) -> Unsubscribe:
        return self.feed.subscribe(predicate, callback)
