from __future__ import annotations

from typing import Iterable

from .models import Branch, Coach, Player


def can_view(coach: Coach, player: Player) -> bool:
    if coach.is_admin:
        return True
    if player.branch is Branch.COACHING:
        return True
    return player.team_id is not None and player.team_id in coach.assigned_teams


def visible_players(coach: Coach, players: Iterable[Player]) -> list[Player]:
    return [p for p in players if can_view(coach, p)]


def players_by_branch(players: Iterable[Player]) -> dict[Branch, list[Player]]:
    grouped: dict[Branch, list[Player]] = {branch: [] for branch in Branch}
    for player in players:
        grouped[player.branch].append(player)
    for items in grouped.values():
        items.sort(key=lambda p: p.name.lower())
    return grouped
