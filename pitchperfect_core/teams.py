"""Bulk team creation from age groups and squad suffixes."""

from __future__ import annotations

from typing import Iterable

from .models import Team


def split_list(text: str) -> list[str]:
    """Split a comma-separated field, trimming blanks and repeats."""
    items: list[str] = []
    for part in (text or "").split(","):
        item = part.strip()
        if item and item not in items:
            items.append(item)
    return items


def bulk_team_names(ages_text: str, suffixes_text: str) -> list[str]:
    """Every age group combined with every suffix, e.g. ``U9 Reds``.

    With only one of the two fields filled in, its entries are the names.
    """
    ages = split_list(ages_text)
    suffixes = split_list(suffixes_text)
    if ages and suffixes:
        return [f"{age} {suffix}" for age in ages for suffix in suffixes]
    return ages or suffixes


def new_teams(names: Iterable[str], existing: Iterable[Team]) -> list[Team]:
    taken = {team.id for team in existing}
    teams: list[Team] = []
    for name in names:
        if name in taken:
            continue
        taken.add(name)
        teams.append(Team(id=name, name=name))
    return teams
