from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable

from .drafts import MAX_STRENGTHS, Draft
from .errors import MissingNarrativeError
from .models import (
    AttendanceRecord,
    Coach,
    Narrative,
    Player,
    RatingsSummary,
    ReportCard,
)
from .skills import overall_rating, stats_from_values


def _new_report_id() -> str:
    return f"rc_{uuid.uuid4().hex}"


def _resolve_author(draft: Draft, current_coach: Coach | None, coaches: Iterable[Coach]) -> tuple[str | None, str | None]:
    author_id = draft.author_coach_id or (current_coach.id if current_coach else None)
    if author_id is None:
        return None, None
    if current_coach is not None and current_coach.id == author_id:
        return author_id, current_coach.name
    for coach in coaches:
        if coach.id == author_id:
            return author_id, coach.name
    return author_id, None


def assemble_report_card(
    draft: Draft,
    narrative: Narrative | None,
    *,
    current_coach: Coach | None = None,
    coaches: Iterable[Coach] = (),
    now: datetime | None = None,
) -> ReportCard:
    if narrative is None:
        raise MissingNarrativeError("Generate the narrative before publishing this report card")

    stats = stats_from_values(draft.skills)
    manual = draft.manual_strengths
    strengths = manual if manual else [s for s in narrative.strengths if s.strip()][:MAX_STRENGTHS]
    improvements = draft.manual_improvements
    if improvements.is_blank():
        improvements = narrative.improvements
    author_id, author_name = _resolve_author(draft, current_coach, coaches)
    stamp = now or datetime.now(timezone.utc)

    return ReportCard(
        id=_new_report_id(),
        season=draft.season,
        quarter=draft.quarter,
        date=stamp.isoformat(),
        author_coach_id=author_id,
        author_coach_name=author_name,
        attendance=AttendanceRecord(
            attendance_score=draft.attendance_score,
            commitment_score=draft.commitment_score,
            note=draft.attendance_note,
        ),
        stats=stats,
        strengths=tuple(strengths),
        improvements=improvements,
        ratings_summary=RatingsSummary(
            application_score=draft.application_score,
            behaviour_score=draft.behaviour_score,
            coach_comment=draft.coach_comment,
        ),
        final_summary=narrative.summary,
        coach_footer_note=draft.coach_footer_note,
        targets=tuple(draft.targets),
        overall_rating=overall_rating(stats),
    )


def prepend_report_card(player: Player, card: ReportCard) -> Player:
    return player.model_copy(update={"report_cards": (card,) + tuple(player.report_cards)})


def assemble(
    draft: Draft,
    player: Player,
    narrative: Narrative | None,
    *,
    current_coach: Coach | None = None,
    coaches: Iterable[Coach] = (),
    now: datetime | None = None,
) -> tuple[Player, ReportCard]:
    """Build a report card from ``draft`` and return it with the updated player.

    ``player`` is left as it was; the returned player shares every existing
    report card with it and has the new one at index 0.
    """
    card = assemble_report_card(draft, narrative, current_coach=current_coach, coaches=coaches, now=now)
    return prepend_report_card(player, card), card
