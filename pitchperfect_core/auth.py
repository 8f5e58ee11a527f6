from __future__ import annotations

from typing import Iterable

from .models import Coach, Player


def authenticate_coach(coaches: Iterable[Coach], identifier: str, password: str) -> Coach | None:
    """Match a coach by email or name and compare the stored password as-is."""
    needle = identifier.strip().lower()
    if not needle:
        return None
    for coach in coaches:
        if needle not in {coach.email.strip().lower(), coach.name.strip().lower()}:
            continue
        if coach.password is not None and coach.password == password:
            return coach
    return None


def authenticate_parent(players: Iterable[Player], player_ref: str, access_code: str) -> Player | None:
    needle = player_ref.strip()
    if not needle:
        return None
    for player in players:
        if player.name.lower() != needle.lower() and player.id != needle:
            continue
        if player.access_code == access_code.strip():
            return player
    return None
