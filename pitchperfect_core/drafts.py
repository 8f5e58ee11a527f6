"""In-progress report cards, one per player.

A draft is created the first time a coach opens a player who has none, and it
stays in the buffer while the coach moves between players. Every edit lands in
the draft of whichever player is active at that moment. The only way a draft
leaves the buffer is :meth:`DraftBuffer.discard_draft`, called after publish.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any

from .models import Improvements, Narrative, Target
from .skills import SKILL_NAMES, default_skill_values

DEFAULT_SKILL_VALUE = 3
DEFAULT_SCORE = 4
MAX_STRENGTHS = 3
TERMS = ("Autumn Term", "Winter Term", "Spring Term", "Summer Term")


def current_season_label(today: date | None = None) -> str:
    today = today or date.today()
    start = today.year if today.month >= 8 else today.year - 1
    return f"{start}/{(start + 1) % 100:02d}"


def current_term(today: date | None = None) -> str:
    today = today or date.today()
    if today.month >= 9:
        return TERMS[0]
    if today.month <= 2:
        return TERMS[1]
    if today.month <= 5:
        return TERMS[2]
    return TERMS[3]


def _check_score(value: int, label: str) -> int:
    score = int(value)
    if not 1 <= score <= 5:
        raise ValueError(f"{label} must be between 1 and 5, got {value!r}")
    return score


@dataclass
class Draft:
    author_coach_id: str | None = None
    season: str = field(default_factory=current_season_label)
    quarter: str = field(default_factory=current_term)
    skills: dict[str, int] = field(default_factory=lambda: default_skill_values(DEFAULT_SKILL_VALUE))
    attendance_score: int = DEFAULT_SCORE
    commitment_score: int = DEFAULT_SCORE
    attendance_note: str = ""
    application_score: int = DEFAULT_SCORE
    behaviour_score: int = DEFAULT_SCORE
    coach_comment: str = ""
    strengths: list[str] = field(default_factory=list)
    key_area: str = ""
    build_on_area: str = ""
    targets: list[Target] = field(default_factory=list)
    coach_notes: str = ""
    coach_footer_note: str = ""
    narrative: Narrative | None = None

    @property
    def manual_strengths(self) -> list[str]:
        return [s.strip() for s in self.strengths if s and s.strip()][:MAX_STRENGTHS]

    @property
    def manual_improvements(self) -> Improvements:
        return Improvements(key_area=self.key_area.strip(), build_on_area=self.build_on_area.strip())


_DRAFT_FIELDS = {f.name for f in fields(Draft)}
_SCORE_FIELDS = {"attendance_score", "commitment_score", "application_score", "behaviour_score"}


class DraftBuffer:
    def __init__(self, current_coach_id: str | None = None) -> None:
        self.current_coach_id = current_coach_id
        self.active_player_id: str | None = None
        self._drafts: dict[str, Draft] = {}

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._drafts

    def __len__(self) -> int:
        return len(self._drafts)

    def get(self, player_id: str) -> Draft | None:
        return self._drafts.get(player_id)

    def new_draft(self) -> Draft:
        return Draft(author_coach_id=self.current_coach_id)

    def select_player(self, player_id: str) -> Draft:
        draft = self._drafts.get(player_id)
        if draft is None:
            draft = self.new_draft()
            self._drafts[player_id] = draft
        self.active_player_id = player_id
        return draft

    def discard_draft(self, player_id: str) -> None:
        self._drafts.pop(player_id, None)

    @property
    def active(self) -> Draft:
        if self.active_player_id is None:
            raise LookupError("No player is selected")
        # Re-seeds if the active draft was just discarded by a publish.
        return self.select_player(self.active_player_id)

    # Edits: each one resolves the active player at call time.

    def update(self, **changes: Any) -> Draft:
        draft = self.active
        unknown = set(changes) - _DRAFT_FIELDS
        if unknown:
            raise AttributeError(f"Unknown draft fields: {sorted(unknown)}")
        for name, value in changes.items():
            if name in _SCORE_FIELDS:
                value = _check_score(value, name)
            setattr(draft, name, value)
        return draft

    def set_stat(self, name: str, value: int) -> Draft:
        if name not in SKILL_NAMES:
            raise KeyError(f"Unknown skill {name!r}")
        draft = self.active
        draft.skills[name] = _check_score(value, name)
        return draft

    def set_attendance(self, attendance_score: int, commitment_score: int, note: str = "") -> Draft:
        return self.update(
            attendance_score=attendance_score,
            commitment_score=commitment_score,
            attendance_note=note,
        )

    def set_ratings_summary(self, application_score: int, behaviour_score: int, comment: str = "") -> Draft:
        return self.update(
            application_score=application_score,
            behaviour_score=behaviour_score,
            coach_comment=comment,
        )

    def set_strength(self, index: int, text: str) -> Draft:
        if not 0 <= index < MAX_STRENGTHS:
            raise IndexError(f"Strength slot must be 0-{MAX_STRENGTHS - 1}")
        draft = self.active
        while len(draft.strengths) <= index:
            draft.strengths.append("")
        draft.strengths[index] = text
        return draft

    def add_target(self, description: str) -> Target:
        target = Target(id=f"tg_{uuid.uuid4().hex[:8]}", description=description.strip())
        self.active.targets.append(target)
        return target

    def toggle_target(self, target_id: str) -> Draft:
        draft = self.active
        draft.targets = [
            t.model_copy(update={"achieved": not t.achieved}) if t.id == target_id else t
            for t in draft.targets
        ]
        return draft

    def remove_target(self, target_id: str) -> Draft:
        draft = self.active
        draft.targets = [t for t in draft.targets if t.id != target_id]
        return draft

    def set_narrative(self, narrative: Narrative | None) -> Draft:
        return self.update(narrative=narrative)

    def edit_narrative(self, **changes: Any) -> Draft:
        draft = self.active
        if draft.narrative is None:
            raise LookupError("No narrative has been generated for this draft")
        if "strengths" in changes:
            changes["strengths"] = tuple(changes["strengths"])
        if isinstance(changes.get("improvements"), dict):
            changes["improvements"] = Improvements.model_validate(changes["improvements"])
        draft.narrative = draft.narrative.model_copy(update=changes)
        return draft
