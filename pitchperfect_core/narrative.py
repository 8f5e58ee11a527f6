"""Narrative text for report cards, generated through an OpenAI chat client."""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import OpenAI
from pydantic import ValidationError

from .drafts import Draft
from .errors import ConfigurationError, NarrativeError
from .models import Narrative, Player, ReportCard
from .skills import format_stats_for_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
ASK_COACH_FALLBACK = "Sorry, I'm having trouble connecting to the coach AI right now."
DRILL_FALLBACK = "No drill suggestion is available right now. Ask your coach at the next session."

SYSTEM_PROMPT = (
    "You are an expert youth football (soccer) coach writing report cards for parents. "
    "Be constructive, encouraging and honest."
)


def build_narrative_prompt(player: Player, draft: Draft) -> str:
    return (
        f"Write a report card summary for {player.name} ({player.position or 'player'}).\n\n"
        f"Skill ratings on a 1-5 scale, grouped by category:\n{format_stats_for_prompt(draft.skills)}\n\n"
        f"Attendance {draft.attendance_score}/5, commitment {draft.commitment_score}/5, "
        f"application {draft.application_score}/5, behaviour {draft.behaviour_score}/5.\n\n"
        f"Coach notes:\n{draft.coach_notes.strip() or '(none)'}\n\n"
        "Respond with JSON only, using this schema:\n"
        '{"summary": "about 50 words on the term", '
        '"strengths": ["three specific strengths"], '
        '"improvements": {"keyArea": "main area to work on", "buildOnArea": "area to build on"}}'
    )


def build_question_prompt(question: str, player: Player, card: ReportCard) -> str:
    stats = ", ".join(f"{s.name} {s.value}/5" for s in card.stats)
    return (
        f"Player: {player.name}, position: {player.position or 'unknown'}.\n"
        f"Report: {card.quarter} {card.season}, overall {card.overall_rating}/5.\n"
        f"Stats: {stats}.\n"
        f"Summary: {card.final_summary}\n"
        f"Strengths: {', '.join(card.strengths) or 'none listed'}.\n"
        f"Key area: {card.improvements.key_area}. Build on: {card.improvements.build_on_area}.\n\n"
        f'Parent\'s question: "{question.strip()}"\n\n'
        "Answer from this report only. Suggest specific drills if asked, stay positive, "
        "and keep the answer under 150 words."
    )


def build_drill_prompt(area: str, player: Player | None = None) -> str:
    who = f"{player.name}, a youth {player.position or 'player'}" if player else "a youth player"
    return (
        f'Suggest one simple drill that {who} can practise at home to improve: "{area.strip()}".\n'
        "Name the drill, say what equipment is needed, and describe it in two or three short steps. "
        "Keep it under 80 words and suitable for a parent to supervise."
    )

def parse_narrative(text: str) -> Narrative:
    try:
        payload = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        raise NarrativeError(f"Narrative response was not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise NarrativeError("Narrative response must be a JSON object")

    improvements = payload.get("improvements")
    if isinstance(improvements, list):
        # Older prompt shape: a plain list of two improvement strings.
        items = [str(i) for i in improvements]
        payload["improvements"] = {
            "keyArea": items[0] if items else "",
            "buildOnArea": items[1] if len(items) > 1 else "",
        }
    try:
        return Narrative.model_validate(payload)
    except ValidationError as exc:
        raise NarrativeError(f"Narrative response did not match the expected shape: {exc}") from exc


class NarrativeGenerator:
    def __init__(self, client: Any, model: str = DEFAULT_MODEL) -> None:
        self.client = client
        self.model = model

    def _complete(self, prompt: str, **kwargs: Any) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                **kwargs,
            )
        except Exception as exc:
            raise NarrativeError(f"Text generation request failed: {exc}") from exc
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise NarrativeError(f"Unexpected text generation response: {response!r}") from exc
        return content or ""

    def generate_structured(self, prompt: str) -> str:
        return self._complete(prompt, response_format={"type": "json_object"}) or "{}"

    def generate_freeform(self, prompt: str) -> str:
        return self._complete(prompt)

    def generate_narrative(self, player: Player, draft: Draft) -> Narrative:
        text = self.generate_structured(build_narrative_prompt(player, draft))
        narrative = parse_narrative(text)
        logger.info("Generated narrative for player %s", player.id)
        return narrative

    def ask_coach(self, question: str, player: Player, card: ReportCard) -> str:
        try:
            answer = self.generate_freeform(build_question_prompt(question, player, card)).strip()
        except NarrativeError:
            logger.exception("Coach question failed for player %s", player.id)
            return ASK_COACH_FALLBACK
        return answer or "I couldn't generate a response at this time."

    def suggest_drill(self, area: str, player: Player | None = None) -> str:
        if not area.strip():
            return DRILL_FALLBACK
        try:
            drill = self.generate_freeform(build_drill_prompt(area, player)).strip()
        except NarrativeError:
            logger.exception("Drill suggestion failed for area %r", area)
            return DRILL_FALLBACK
        return drill or DRILL_FALLBACK


def build_generator_from_settings(api_key: str | None, model: str | None = None) -> NarrativeGenerator:
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY is not configured")
    return NarrativeGenerator(OpenAI(api_key=api_key), model=model or DEFAULT_MODEL)
