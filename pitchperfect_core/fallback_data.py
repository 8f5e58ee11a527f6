from __future__ import annotations

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from .brand import DEFAULT_LOGO_URL
from .metrics import mean_rating
from .skills import create_stats

DATASET_PATH = Path(__file__).resolve().parent / "data" / "fallback_dataset.json"


@lru_cache(maxsize=4)
def _load_cached(dataset_path: str) -> dict[str, Any]:
    with Path(dataset_path).open("r", encoding="utf-8") as f:
        return json.load(f)


def load_fallback_dataset(path: Path | None = None) -> dict[str, Any]:
    return copy.deepcopy(_load_cached(str(path or DATASET_PATH)))


def _expand_card(card: dict[str, Any]) -> dict[str, Any]:
    values = card.pop("statValues", None)
    if values is not None:
        stats = create_stats(
            values.get("Technical", []),
            values.get("Tactical", []),
            values.get("Physical", []),
            values.get("Psychological", []),
        )
        card["stats"] = [stat.to_wire() for stat in stats]
    if "overallRating" not in card and card.get("stats"):
        card["overallRating"] = mean_rating(s["value"] for s in card["stats"])
    return card


def fallback_players(path: Path | None = None) -> list[dict[str, Any]]:
    players = load_fallback_dataset(path).get("players", [])
    for player in players:
        player["reportCards"] = [_expand_card(card) for card in player.get("reportCards", [])]
    return players


def fallback_coaches(path: Path | None = None) -> list[dict[str, Any]]:
    return list(load_fallback_dataset(path).get("coaches", []))


def fallback_teams(path: Path | None = None) -> list[dict[str, Any]]:
    return list(load_fallback_dataset(path).get("teams", []))


def fallback_logo(path: Path | None = None) -> str:
    return str(load_fallback_dataset(path).get("logoUrl") or DEFAULT_LOGO_URL)
