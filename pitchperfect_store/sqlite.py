from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path
from typing import Any

from pitchperfect_core.errors import ConfigurationError, StoreError

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


class SqliteRowStore:
    """Row store backed by one sqlite file.

    Each entity table holds the full entity as a JSON blob under its id, the
    same shape the hosted tables use. The connection is shared between
    Streamlit sessions, so every statement runs under one lock.
    """

    def __init__(self, db_path: str | Path | None) -> None:
        if not db_path:
            raise ConfigurationError("PITCHPERFECT_DB_PATH is not configured")
        self.db_path = Path(db_path)
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise ConfigurationError(f"Unable to open database at {self.db_path}: {exc}") from exc
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self.feed = ChangeFeed()
        try:
            self.initialize()
        except sqlite3.Error as exc:
            self.conn.close()
            raise ConfigurationError(f"Unable to initialise database at {self.db_path}: {exc}") from exc

    def initialize(self) -> None:
        with self._lock:
            for table in ENTITY_COLLECTIONS:
                self.conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        id TEXT PRIMARY KEY,
                        data TEXT NOT NULL
                    )
                    """
                )
            self.conn.execute(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            for table in ENTITY_COLLECTIONS:
                self._migrate_add_updated_at(table)
            self.conn.commit()

    def _migrate_add_updated_at(self, table: str) -> None:
        columns = self.query_all(f"PRAGMA table_info({table})")
        column_names = {str(col["name"]) for col in columns}
        if "updated_at" not in column_names:
            self.conn.execute(f"ALTER TABLE {table} ADD COLUMN updated_at TEXT")

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    def execute(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        with self._lock:
            try:
                cur = self.conn.execute(query, params)
                self.conn.commit()
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc
            return cur

    def query_all(self, query: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        with self._lock:
            try:
                cur = self.conn.execute(query, params)
                return list(cur.fetchall())
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def query_one(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Row | None:
        with self._lock:
            try:
                cur = self.conn.execute(query, params)
                return cur.fetchone()
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc

    def ping(self) -> None:
        try:
            self.query_one("SELECT 1")
        except StoreError as exc:
            raise ConfigurationError(f"Database at {self.db_path} is not reachable: {exc}") from exc

    def fetch(self, collection: str) -> list[dict[str, Any]]:
        check_collection(collection)
        rows = self.query_all(f"SELECT data FROM {collection} ORDER BY rowid")
        records: list[dict[str, Any]] = []
        for row in rows:
            try:
                records.append(json.loads(row["data"]))
            except json.JSONDecodeError as exc:
                raise StoreError(f"Corrupt JSON in {collection}: {exc}") from exc
        return records

    def upsert(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        check_collection(collection)
        self.execute(
            f"""
            INSERT INTO {collection}(id, data, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(id) DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at
            """,
            (str(record_id), json.dumps(data)),
        )
        self.feed.publish(ChangeNotification(collection, "upsert", str(record_id)))

    def delete(self, collection: str, record_id: str) -> None:
        check_collection(collection)
        self.execute(f"DELETE FROM {collection} WHERE id = ?", (str(record_id),))
        self.feed.publish(ChangeNotification(collection, "delete", str(record_id)))

    def fetch_setting(self, key: str) -> str | None:
        row = self.query_one("SELECT value FROM settings WHERE key = ?", (key,))
        return str(row["value"]) if row else None

    def upsert_setting(self, key: str, value: str) -> None:
        self.execute(
            """
            INSERT INTO settings(key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value),
        )
        self.feed.publish(ChangeNotification(SETTINGS, "upsert", key))

    def subscribe(self, predicate: Predicate, callback: Callback) -> Unsubscribe:
        return self.feed.subscribe(predicate, callback)
