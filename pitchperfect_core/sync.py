"""Local copies of the portal's entities, kept in step with a row store.

The coordinator writes optimistically: the local collection changes first and
the store write follows. A failed write is reported through the returned
:class:`WriteResult` and logged; local state keeps the user's change.

Any change notification from the store triggers a full refetch of players,
coaches, teams and the logo, replacing local state wholesale. Entities whose
own write is still in flight keep their local version during that refetch, so
a notification cannot roll back an edit this session has not finished saving.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeVar

from pydantic import ValidationError

from pitchperfect_store.base import (
    COACHES,
    LOGO_SETTING_KEY,
    PLAYERS,
    SETTINGS,
    TEAMS,
    ChangeNotification,
    RowStore,
    Unsubscribe,
    watch_all,
)

from .errors import ConfigurationError
from .fallback_data import fallback_coaches, fallback_logo, fallback_players, fallback_teams
from .models import UNASSIGNED_TEAM_ID, Branch, Coach, Player, Team
from .sanitizer import sanitize_player
from .teams import new_teams

logger = logging.getLogger(__name__)

E = TypeVar("E", Player, Coach, Team)

COLLECTION_FOR_TYPE: dict[type, str] = {Player: PLAYERS, Coach: COACHES, Team: TEAMS}


@dataclass(frozen=True)
class WriteResult:
    collection: str
    record_id: str
    ok: bool
    error: str | None = None

    @classmethod
    def success(cls, collection: str, record_id: str) -> "WriteResult":
        return cls(collection, record_id, True)

    @classmethod
    def failure(cls, collection: str, record_id: str, error: str) -> "WriteResult":
        return cls(collection, record_id, False, error)


@dataclass(frozen=True)
class LoadReport:
    used_fallback: tuple[str, ...]
    skipped_records: int


def _parse_players(rows: list[dict[str, Any]]) -> tuple[list[Player], int]:
    players: list[Player] = []
    skipped = 0
    for row in rows:
        try:
            players.append(sanitize_player(row))
        except (ValidationError, TypeError, AttributeError) as exc:
            skipped += 1
            logger.warning("Skipping unreadable player record %r: %s", row.get("id"), exc)
    return players, skipped


def _parse_models(model: type[E], rows: list[dict[str, Any]]) -> tuple[list[E], int]:
    items: list[E] = []
    skipped = 0
    for row in rows:
        try:
            items.append(model.model_validate(row))
        except ValidationError as exc:
            skipped += 1
            logger.warning("Skipping unreadable %s record %r: %s", model.__name__, row.get("id"), exc)
    return items, skipped


class SyncCoordinator:
    def __init__(
        self,
        store: RowStore | None,
        *,
        on_write_error: Callable[[WriteResult], None] | None = None,
    ) -> None:
        self.store = store
        self.on_write_error = on_write_error
        self.players: list[Player] = []
        self.coaches: list[Coach] = []
        self.teams: list[Team] = []
        self.logo_url: str = fallback_logo()
        self.loaded = False
        self._pending: set[tuple[str, str]] = set()
        self._lock = threading.RLock()
        self._unsubscribe: Unsubscribe | None = None

    # Loading

    def _require_store(self) -> RowStore:
        if self.store is None:
            raise ConfigurationError("No row store is configured")
        try:
            self.store.ping()
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Row store is not reachable: {exc}") from exc
        return self.store

    def _fetch_rows(self, store: RowStore, collection: str) -> list[dict[str, Any]]:
        try:
            return store.fetch(collection)
        except Exception as exc:
            logger.error("Fetching %s failed: %s", collection, exc)
            return []

    def _fetch_logo(self, store: RowStore) -> str | None:
        try:
            return store.fetch_setting(LOGO_SETTING_KEY)
        except Exception as exc:
            logger.error("Fetching logo failed: %s", exc)
            return None

    def _fetch_everything(self) -> tuple[list[Player], list[Coach], list[Team], str, LoadReport]:
        store = self._require_store()
        # Collections are fetched one after another. sqlite serialises reads on a
        # single connection, so concurrent fetches would not finish any sooner.
        used_fallback: list[str] = []

        players, skipped_players = _parse_players(self._fetch_rows(store, PLAYERS))
        if not players:
            used_fallback.append(PLAYERS)
            players, _ = _parse_players(fallback_players())

        coaches, skipped_coaches = _parse_models(Coach, self._fetch_rows(store, COACHES))
        if not coaches:
            used_fallback.append(COACHES)
            coaches, _ = _parse_models(Coach, fallback_coaches())

        teams, skipped_teams = _parse_models(Team, self._fetch_rows(store, TEAMS))
        if not teams:
            used_fallback.append(TEAMS)
            teams, _ = _parse_models(Team, fallback_teams())

        logo = self._fetch_logo(store) or fallback_logo()
        if used_fallback:
            logger.info("Using built-in data for: %s", ", ".join(used_fallback))
        report = LoadReport(tuple(used_fallback), skipped_players + skipped_coaches + skipped_teams)
        return players, coaches, teams, logo, report

    def initial_load(self) -> LoadReport:
        players, coaches, teams, logo, report = self._fetch_everything()
        with self._lock:
            self.players, self.coaches, self.teams, self.logo_url = players, coaches, teams, logo
            self.loaded = True
        logger.info("Loaded %d players, %d coaches, %d teams", len(players), len(coaches), len(teams))
        return report

    def refetch(self) -> LoadReport:
        players, coaches, teams, logo, report = self._fetch_everything()
        with self._lock:
            self.players = self._keep_pending(PLAYERS, self.players, players)
            self.coaches = self._keep_pending(COACHES, self.coaches, coaches)
            self.teams = self._keep_pending(TEAMS, self.teams, teams)
            self.logo_url = logo
        return report

    def _keep_pending(self, collection: str, local: list[E], fetched: list[E]) -> list[E]:
        pending_ids = {rid for (col, rid) in self._pending if col == collection}
        if not pending_ids:
            return fetched
        local_by_id = {item.id: item for item in local}
        merged: list[E] = []
        for item in fetched:
            if item.id not in pending_ids:
                merged.append(item)
            elif item.id in local_by_id:
                merged.append(local_by_id[item.id])
        fetched_ids = {item.id for item in fetched}
        merged.extend(local_by_id[rid] for rid in pending_ids if rid in local_by_id and rid not in fetched_ids)
        return merged

    # Realtime

    def on_remote_change(self, notification: ChangeNotification) -> None:
        logger.debug("Remote change %s, refetching everything", notification)
        try:
            self.refetch()
        except ConfigurationError as exc:
            logger.error("Refetch after remote change failed: %s", exc)

    def start_realtime(self) -> None:
        if self._unsubscribe is not None:
            return
        store = self._require_store()
        self._unsubscribe = store.subscribe(watch_all, self.on_remote_change)

    def stop_realtime(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # Lookups

    def get_player(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)

    def get_coach(self, coach_id: str) -> Coach | None:
        return next((c for c in self.coaches if c.id == coach_id), None)

    def get_team(self, team_id: str) -> Team | None:
        return next((t for t in self.teams if t.id == team_id), None)

    # Writes

    def _collection(self, collection: str) -> list[Any]:
        return {PLAYERS: self.players, COACHES: self.coaches, TEAMS: self.teams}[collection]

    def _replace_local(self, collection: str, entity: Any) -> None:
        items = self._collection(collection)
        for idx, item in enumerate(items):
            if item.id == entity.id:
                items[idx] = entity
                return
        items.append(entity)

    def _remove_local(self, collection: str, record_id: str) -> None:
        items = self._collection(collection)
        items[:] = [item for item in items if item.id != record_id]

    def _report(self, result: WriteResult) -> WriteResult:
        if not result.ok:
            logger.error("Write to %s/%s failed: %s", result.collection, result.record_id, result.error)
            if self.on_write_error is not None:
                self.on_write_error(result)
        return result

    def _remote_write(self, collection: str, record_id: str, op: Callable[[RowStore], None]) -> WriteResult:
        key = (collection, record_id)
        with self._lock:
            self._pending.add(key)
        try:
            if self.store is None:
                raise ConfigurationError("No row store is configured")
            op(self.store)
        except Exception as exc:
            return self._report(WriteResult.failure(collection, record_id, str(exc)))
        finally:
            with self._lock:
                self._pending.discard(key)
        return WriteResult.success(collection, record_id)

    def apply_optimistic_update(self, entity: Player | Coach | Team) -> WriteResult:
        collection = COLLECTION_FOR_TYPE[type(entity)]
        with self._lock:
            self._replace_local(collection, entity)
        payload = entity.to_wire()
        return self._remote_write(collection, entity.id, lambda store: store.upsert(collection, entity.id, payload))

    def _delete(self, collection: str, record_id: str) -> WriteResult:
        with self._lock:
            self._remove_local(collection, record_id)
        return self._remote_write(collection, record_id, lambda store: store.delete(collection, record_id))

    def delete_player(self, player_id: str) -> WriteResult:
        return self._delete(PLAYERS, player_id)

    def delete_coach(self, coach_id: str) -> WriteResult:
        return self._delete(COACHES, coach_id)

    def delete_team(self, team_id: str) -> list[WriteResult]:
        """Delete a team and move its players to the unassigned team.

        Returns one result per write: the reassigned players first, then the
        team deletion itself.
        """
        results: list[WriteResult] = []
        for player in list(self.players):
            if player.team_id == team_id and player.branch is not Branch.COACHING:
                moved = player.model_copy(update={"team_id": UNASSIGNED_TEAM_ID})
                results.append(self.apply_optimistic_update(moved))
        for coach in list(self.coaches):
            if team_id in coach.assigned_teams:
                trimmed = coach.model_copy(
                    update={"assigned_teams": tuple(t for t in coach.assigned_teams if t != team_id)}
                )
                results.append(self.apply_optimistic_update(trimmed))
        results.append(self._delete(TEAMS, team_id))
        return results

    def create_teams(self, names: Iterable[str]) -> list[WriteResult]:
        """Create a team per name; names already used as a team id are skipped."""
        with self._lock:
            teams = new_teams(names, self.teams)
        results = [self.apply_optimistic_update(team) for team in teams]
        logger.info("Created %d teams", len(teams))
        return results

    def save_logo(self, logo_url: str) -> WriteResult:
        with self._lock:
            self.logo_url = logo_url
        return self._remote_write(
            SETTINGS, LOGO_SETTING_KEY, lambda store: store.upsert_setting(LOGO_SETTING_KEY, logo_url)
        )
