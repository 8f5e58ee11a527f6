from .base import (
    COACHES,
    ENTITY_COLLECTIONS,
    LOGO_SETTING_KEY,
    PLAYERS,
    SETTINGS,
    TEAMS,
    WATCHED_COLLECTIONS,
    ChangeFeed,
    ChangeNotification,
    RowStore,
    watch_all,
)
from .memory import InMemoryRowStore
from .sqlite import SqliteRowStore

__all__ = [
    "PLAYERS",
    "COACHES",
    "TEAMS",
    "SETTINGS",
    "ENTITY_COLLECTIONS",
    "WATCHED_COLLECTIONS",
    "LOGO_SETTING_KEY",
    "ChangeFeed",
    "ChangeNotification",
    "RowStore",
    "watch_all",
    "InMemoryRowStore",
    "SqliteRowStore",
]
