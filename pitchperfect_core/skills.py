from __future__ import annotations

from typing import Iterable, Sequence

from .metrics import mean_rating
from .models import STAT_GROUPS, Stat

SKILL_TEMPLATE: dict[str, tuple[str, ...]] = {
    "Technical": (
        "Ball Mastery",
        "1v1 Attacking",
        "1v1 Defending",
        "First Touch",
        "Ball Striking",
        "Passing Technique",
        "Non-Dominant Foot",
    ),
    "Tactical": (
        "Scanning/Awareness",
        "Movement off Ball",
        "Pos. In Possession",
        "Pos. Out Possession",
        "Decision Making",
    ),
    "Physical": (
        "Speed/Acceleration",
        "Agility & Balance",
        "Strength",
        "Endurance",
    ),
    "Psychological": (
        "Focus",
        "Confidence",
        "Coachability",
        "Resilience",
        "Teamwork",
        "Encouraging Others",
    ),
}

SKILL_NAMES: tuple[str, ...] = tuple(name for group in STAT_GROUPS for name in SKILL_TEMPLATE[group])
SKILL_GROUP_BY_NAME: dict[str, str] = {
    name: group for group in STAT_GROUPS for name in SKILL_TEMPLATE[group]
}


def create_stats(
    technical: Sequence[int],
    tactical: Sequence[int],
    physical: Sequence[int],
    psychological: Sequence[int],
) -> tuple[Stat, ...]:
    by_group = {
        "Technical": technical,
        "Tactical": tactical,
        "Physical": physical,
        "Psychological": psychological,
    }
    stats: list[Stat] = []
    for group in STAT_GROUPS:
        names = SKILL_TEMPLATE[group]
        values = list(by_group[group])
        if len(values) != len(names):
            raise ValueError(f"{group} needs {len(names)} values, got {len(values)}")
        stats.extend(Stat(name=name, group=group, value=int(v)) for name, v in zip(names, values))
    return tuple(stats)


def default_skill_values(value: int = 3) -> dict[str, int]:
    return {name: value for name in SKILL_NAMES}


def stats_from_values(values: dict[str, int]) -> tuple[Stat, ...]:
    return tuple(
        Stat(name=name, group=SKILL_GROUP_BY_NAME[name], value=int(values[name]))
        for name in SKILL_NAMES
    )


def overall_rating(stats: Iterable[Stat]) -> float:
    return mean_rating(stat.value for stat in stats)


def group_means(stats: Iterable[Stat]) -> dict[str, float | None]:
    buckets: dict[str, list[int]] = {group: [] for group in STAT_GROUPS}
    for stat in stats:
        buckets.setdefault(stat.group, []).append(stat.value)
    return {group: (mean_rating(vals) if vals else None) for group, vals in buckets.items()}


def format_stats_for_prompt(values: dict[str, int]) -> str:
    lines: list[str] = []
    for group in STAT_GROUPS:
        parts = [f"{name}: {values.get(name, '-')}/5" for name in SKILL_TEMPLATE[group]]
        lines.append(f"{group}: " + ", ".join(parts))
    return "\n".join(lines)
