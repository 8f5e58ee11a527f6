from __future__ import annotations

import inspect
import logging
import threading
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

PLAYERS = "players"
COACHES = "coaches"
TEAMS = "teams"
SETTINGS = "settings"
ENTITY_COLLECTIONS = (PLAYERS, COACHES, TEAMS)
WATCHED_COLLECTIONS = ENTITY_COLLECTIONS + (SETTINGS,)
LOGO_SETTING_KEY = "team_logo"


@dataclass(frozen=True)
class ChangeNotification:
    collection: str
    event: str  # "upsert" or "delete"
    record_id: str


Predicate = Callable[[ChangeNotification], bool]
Callback = Callable[[ChangeNotification], None]
Unsubscribe = Callable[[], None]


class RowStore(Protocol):
    def ping(self) -> None: ...

    def fetch(self, collection: str) -> list[dict[str, Any]]: ...

    def upsert(self, collection: str, record_id: str, data: dict[str, Any]) -> None: ...

    def delete(self, collection: str, record_id: str) -> None: ...

    def fetch_setting(self, key: str) -> str | None: ...

    def upsert_setting(self, key: str, value: str) -> None: ...

    def subscribe(self, predicate: Predicate, callback: Callback) -> Unsubscribe: ...


def check_collection(collection: str) -> None:
    if collection not in ENTITY_COLLECTIONS:
        raise ValueError(f"Unknown collection '{collection}'. Expected one of {', '.join(ENTITY_COLLECTIONS)}")


def watch_all(notification: ChangeNotification) -> bool:
    return notification.collection in WATCHED_COLLECTIONS


class ChangeFeed:
    """Fan-out of change notifications to subscribers.

    Callbacks run after the write that triggered them has committed. A failing
    callback is logged and does not stop delivery to the others.

    Bound methods are held weakly, so an object that subscribed one of its
    methods and was then dropped stops receiving notifications and its entry
    is pruned on the next publish.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: dict[int, tuple[Predicate, Callable[[], Callback | None]]] = {}
        self._next_id = 0

    def subscribe(self, predicate: Predicate, callback: Callback) -> Unsubscribe:
        with self._lock:
            token = self._next_id
            self._next_id += 1
            self._subscribers[token] = (predicate, _callback_ref(callback))

        def _unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)

        return _unsubscribe

    def _live_subscribers(self) -> list[tuple[Predicate, Callback]]:
        live: list[tuple[Predicate, Callback]] = []
        with self._lock:
            for token, (predicate, ref) in list(self._subscribers.items()):
                callback = ref()
                if callback is None:
                    del self._subscribers[token]
                    continue
                live.append((predicate, callback))
        return live

    def publish(self, notification: ChangeNotification) -> None:
        for predicate, callback in self._live_subscribers():
            if not predicate(notification):
                continue
            try:
                callback(notification)
            except Exception:
                logger.exception("Change subscriber failed for %s", notification)

    def __len__(self) -> int:
        return len(self._live_subscribers())


def _callback_ref(callback: Callback) -> Callable[[], Callback | None]:
    if inspect.ismethod(callback):
        return weakref.WeakMethod(callback)
    return lambda: callback
