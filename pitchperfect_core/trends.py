from __future__ import annotations

import pandas as pd

from .models import STAT_GROUPS, Player, ReportCard
from .skills import group_means

HISTORY_COLUMNS = ["report_id", "date", "label", "overall", *STAT_GROUPS]


def _card_label(card: ReportCard, seen: set[str]) -> str:
    base = f"{card.quarter} {card.season}".strip()
    day = card.date[:10]
    label = f"{base} ({day})" if day else base
    n = 2
    candidate = label
    while candidate in seen:
        candidate = f"{label} #{n}"
        n += 1
    seen.add(candidate)
    return candidate


def report_history_frame(player: Player) -> pd.DataFrame:
    """One row per report card, oldest first, for the parent trend chart.

    Labels carry the card date, and a counter when two cards share a date, so
    that cards from the same term stay separate points on the chart.
    """
    rows: list[dict[str, object]] = []
    seen: set[str] = set()
    for card in reversed(player.report_cards):
        means = group_means(card.stats)
        rows.append(
            {
                "report_id": card.id,
                "date": card.date,
                "label": _card_label(card, seen),
                "overall": card.overall_rating,
                **{group: means.get(group) for group in STAT_GROUPS},
            }
        )
    if not rows:
        return pd.DataFrame(columns=HISTORY_COLUMNS)
    frame = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    frame["date"] = pd.to_datetime(frame["date"], errors="coerce", utc=True)
    return frame


def history_long_frame(player: Player) -> pd.DataFrame:
    frame = report_history_frame(player)
    if frame.empty:
        return pd.DataFrame(columns=["label", "date", "category", "rating"])
    return frame.melt(
        id_vars=["label", "date"],
        value_vars=["overall", *STAT_GROUPS],
        var_name="category",
        value_name="rating",
    ).dropna(subset=["rating"])


def stat_frame(card: ReportCard) -> pd.DataFrame:
    return pd.DataFrame(
        [{"name": s.name, "group": s.group, "value": s.value, "full_mark": s.full_mark} for s in card.stats],
        columns=["name", "group", "value", "full_mark"],
    )


def compare_to_previous(player: Player) -> dict[str, float | None]:
    """Change in each group mean between the latest card and the one before."""
    if len(player.report_cards) < 2:
        return {group: None for group in ("overall", *STAT_GROUPS)}
    latest, previous = player.report_cards[0], player.report_cards[1]
    latest_means, previous_means = group_means(latest.stats), group_means(previous.stats)
    deltas: dict[str, float | None] = {"overall": round(latest.overall_rating - previous.overall_rating, 1)}
    for group in STAT_GROUPS:
        a, b = latest_means.get(group), previous_means.get(group)
        deltas[group] = None if a is None or b is None else round(a - b, 1)
    return deltas
