"""Upgrade player records written under older schemas.

Early report cards stored skill values on a 0-100 scale and attendance and
ratings-summary scores on 0-10. Those records carry no version marker, so each
field is judged by its own magnitude: anything above the current maximum of 5
is assumed to be on the old scale and divided down. Values already on the
current scale pass through untouched, which makes the transform idempotent.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from .metrics import clamp_score, mean_rating, round_half_up, round_score
from .models import SCHEMA_VERSION, UNASSIGNED_TEAM_ID, Branch, Player
from .skills import SKILL_GROUP_BY_NAME

logger = logging.getLogger(__name__)

MAX_SCORE = 5
LEGACY_SKILL_DIVISOR = 20
LEGACY_SCORE_DIVISOR = 2


def _to_float(value: Any) -> float | None:
    try:
        if value is None or value == "":
            return None
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _rescale_int(value: Any, divisor: int, default: int) -> int:
    number = _to_float(value)
    if number is None:
        return default
    if number > MAX_SCORE:
        number = number / divisor
    return clamp_score(round_score(number))


def _rescale_overall(value: Any) -> float | None:
    number = _to_float(value)
    if number is None:
        return None
    if number > MAX_SCORE:
        number = round_half_up(number / LEGACY_SKILL_DIVISOR, 1)
    return min(float(MAX_SCORE), max(0.0, number))


def _resolve_branch(raw: Any) -> Branch:
    if not raw:
        return Branch.ACADEMY
    try:
        return Branch(str(raw).upper())
    except ValueError:
        logger.warning("Unknown branch %r, treating as ACADEMY", raw)
        return Branch.ACADEMY


def _sanitize_improvements(raw: Any) -> dict[str, str]:
    if isinstance(raw, (list, tuple)):
        items = [str(item) for item in raw]
        return {
            "keyArea": items[0] if len(items) > 0 else "",
            "buildOnArea": items[1] if len(items) > 1 else "",
        }
    if isinstance(raw, Mapping):
        return {
            "keyArea": str(raw.get("keyArea") or ""),
            "buildOnArea": str(raw.get("buildOnArea") or ""),
        }
    return {"keyArea": "", "buildOnArea": ""}


def _sanitize_targets(raw_targets: Any) -> list[dict[str, Any]]:
    targets: list[dict[str, Any]] = []
    for i, target in enumerate(raw_targets or []):
        targets.append(
            {
                "id": str(target.get("id") or f"tg_{i}"),
                "description": str(target.get("description") or ""),
                "achieved": bool(target.get("achieved", False)),
            }
        )
    return targets


def _sanitize_stats(raw_stats: Any) -> list[dict[str, Any]]:
    stats: list[dict[str, Any]] = []
    for stat in raw_stats or []:
        name = str(stat.get("name", ""))
        group = stat.get("group") or SKILL_GROUP_BY_NAME.get(name, "Technical")
        stats.append(
            {
                "name": name,
                "group": group,
                "value": _rescale_int(stat.get("value"), LEGACY_SKILL_DIVISOR, default=3),
                "fullMark": MAX_SCORE,
            }
        )
    return stats


def sanitize_report_card(raw: Mapping[str, Any], index: int = 0) -> dict[str, Any]:
    card = dict(raw)
    card["id"] = str(card.get("id") or f"rc_legacy_{index}")
    for key in ("season", "quarter", "date"):
        card[key] = str(card.get(key) or "")

    card["stats"] = _sanitize_stats(card.get("stats"))

    attendance = dict(card.get("attendance") or {})
    card["attendance"] = {
        "attendanceScore": _rescale_int(attendance.get("attendanceScore"), LEGACY_SCORE_DIVISOR, default=4),
        "commitmentScore": _rescale_int(attendance.get("commitmentScore"), LEGACY_SCORE_DIVISOR, default=4),
        "note": str(attendance.get("note") or ""),
    }

    ratings = dict(card.get("ratingsSummary") or {})
    card["ratingsSummary"] = {
        "applicationScore": _rescale_int(ratings.get("applicationScore"), LEGACY_SCORE_DIVISOR, default=4),
        "behaviourScore": _rescale_int(ratings.get("behaviourScore"), LEGACY_SCORE_DIVISOR, default=4),
        "coachComment": str(ratings.get("coachComment") or ""),
    }

    overall = _rescale_overall(card.get("overallRating"))
    if overall is None:
        overall = mean_rating(s["value"] for s in card["stats"]) if card["stats"] else 0.0
    card["overallRating"] = overall

    card["strengths"] = [str(s) for s in (card.get("strengths") or [])]
    card["targets"] = _sanitize_targets(card.get("targets"))
    card["coachFooterNote"] = str(card.get("coachFooterNote") or "")
    card["improvements"] = _sanitize_improvements(card.get("improvements"))
    card["finalSummary"] = str(card.get("finalSummary") or card.get("coachNotes") or "")
    card.pop("coachNotes", None)
    return card


def sanitize_player(raw: Mapping[str, Any] | Player) -> Player:
    data: dict[str, Any] = raw.to_wire() if isinstance(raw, Player) else dict(raw)

    branch = _resolve_branch(data.get("branch"))
    data["branch"] = branch.value
    legacy_team = data.pop("ageGroup", None)
    if branch is Branch.COACHING:
        data.pop("teamId", None)
    else:
        data["teamId"] = data.get("teamId") or legacy_team or UNASSIGNED_TEAM_ID

    data["reportCards"] = [
        sanitize_report_card(card, index=i) for i, card in enumerate(data.get("reportCards") or [])
    ]
    data["schemaVersion"] = SCHEMA_VERSION
    return Player.model_validate(data)
