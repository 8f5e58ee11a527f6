from __future__ import annotations

import logging
from datetime import datetime

from .assembly import assemble
from .drafts import DraftBuffer
from .models import Coach, ReportCard
from .sync import SyncCoordinator, WriteResult

logger = logging.getLogger(__name__)


def publish_report(
    buffer: DraftBuffer,
    coordinator: SyncCoordinator,
    player_id: str,
    current_coach: Coach | None,
    *,
    now: datetime | None = None,
) -> tuple[ReportCard, WriteResult]:
    """Turn the player's draft into a published report card.

    The card is appended locally even when the store write fails; the draft
    is discarded either way because the card now exists in local state.
    Raises :class:`MissingNarrativeError` without touching anything when the
    narrative has not been generated yet.
    """
    player = coordinator.get_player(player_id)
    if player is None:
        raise KeyError(f"Unknown player '{player_id}'")
    draft = buffer.get(player_id) or buffer.select_player(player_id)
    updated, card = assemble(
        draft,
        player,
        draft.narrative,
        current_coach=current_coach,
        coaches=coordinator.coaches,
        now=now,
    )
    result = coordinator.apply_optimistic_update(updated)
    buffer.discard_draft(player_id)
    logger.info("Published report %s for player %s (saved=%s)", card.id, player_id, result.ok)
    return card, result
