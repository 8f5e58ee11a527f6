import json

import pytest

from pitchperfect_core.drafts import Draft
from pitchperfect_core.errors import ConfigurationError, NarrativeError
from pitchperfect_core.models import Player
from pitchperfect_core.narrative import (
    ASK_COACH_FALLBACK,
    DRILL_FALLBACK,
    NarrativeGenerator,
    build_drill_prompt,
    build_generator_from_settings,
    build_narrative_prompt,
    parse_narrative,
)
from pitchperfect_core.sync import SyncCoordinator
from pitchperfect_store.memory import InMemoryRowStore

PLAYER = Player(id="p1", name="Luke", position="Midfield")


def test_generate_narrative_uses_json_mode(make_chat_client, narrative_json):
    client = make_chat_client(content=narrative_json)
    generator = NarrativeGenerator(client, model="test-model")
    draft = Draft(coach_notes="Great energy")

    narrative = generator.generate_narrative(PLAYER, draft)

    assert narrative.summary == "Luke had a fantastic term."
    assert narrative.strengths == ("Work rate", "Passing", "Speed")
    assert narrative.improvements.build_on_area == "Weak foot"
    call = client.calls[0]
    assert call["model"] == "test-model"
    assert call["response_format"] == {"type": "json_object"}
    assert "Great energy" in call["messages"][-1]["content"]


def test_prompt_lists_grouped_skills():
    prompt = build_narrative_prompt(PLAYER, Draft())
    for group in ("Technical", "Tactical", "Physical", "Psychological"):
        assert f"{group}:" in prompt
    assert "Ball Mastery: 3/5" in prompt


def test_malformed_json_raises_and_draft_is_untouched(make_chat_client):
    generator = NarrativeGenerator(make_chat_client(content="not json at all"))
    draft = Draft()
    with pytest.raises(NarrativeError):
        generator.generate_narrative(PLAYER, draft)
    assert draft.narrative is None


def test_transport_error_becomes_narrative_error(make_chat_client):
    generator = NarrativeGenerator(make_chat_client(error=TimeoutError("slow")))
    with pytest.raises(NarrativeError):
        generator.generate_narrative(PLAYER, Draft())


def test_parse_accepts_legacy_improvements_list():
    narrative = parse_narrative(json.dumps({"summary": "ok", "strengths": [], "improvements": ["Heading", "Crossing"]}))
    assert narrative.improvements.key_area == "Heading"
    assert narrative.improvements.build_on_area == "Crossing"


def test_parse_rejects_wrong_shape():
    with pytest.raises(NarrativeError):
        parse_narrative(json.dumps(["summary"]))
    with pytest.raises(NarrativeError):
        parse_narrative(json.dumps({"strengths": []}))


def _published_card():
    coord = SyncCoordinator(InMemoryRowStore())
    coord.initial_load()
    luke = coord.get_player("p1")
    return luke, luke.latest_report


def test_ask_coach_returns_answer(make_chat_client):
    client = make_chat_client(content="  Try wall passes twice a week.  ")
    player, card = _published_card()
    answer = NarrativeGenerator(client).ask_coach("What should he practise?", player, card)
    assert answer == "Try wall passes twice a week."
    assert "response_format" not in client.calls[0]
    assert "What should he practise?" in client.calls[0]["messages"][-1]["content"]


def test_ask_coach_falls_back_on_failure(make_chat_client):
    player, card = _published_card()
    answer = NarrativeGenerator(make_chat_client(error=RuntimeError("boom"))).ask_coach("Hi?", player, card)
    assert answer == ASK_COACH_FALLBACK


def test_missing_api_key_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        build_generator_from_settings(None)
    with pytest.raises(ConfigurationError):
        build_generator_from_settings("")


def test_drill_prompt_names_the_area_and_player():
    prompt = build_drill_prompt("  Scanning  ", Player(id="p1", name="Luke", position="Midfielder"))
    assert '"Scanning"' in prompt
    assert "Luke, a youth Midfielder" in prompt
    assert "a youth player" in build_drill_prompt("Weak foot")


def test_suggest_drill_is_freeform(make_chat_client):
    client = make_chat_client(content=" Wall passes: 20 each foot. ")
    drill = NarrativeGenerator(client).suggest_drill("Weak foot")
    assert drill == "Wall passes: 20 each foot."
    assert "response_format" not in client.calls[0]
    assert '"Weak foot"' in client.calls[0]["messages"][-1]["content"]


def test_suggest_drill_falls_back_without_calling_for_blank_area(make_chat_client):
    client = make_chat_client(content="unused")
    assert NarrativeGenerator(client).suggest_drill("   ") == DRILL_FALLBACK
    assert client.calls == []


def test_suggest_drill_falls_back_on_failure(make_chat_client):
    generator = NarrativeGenerator(make_chat_client(error=RuntimeError("boom")))
    assert generator.suggest_drill("Heading") == DRILL_FALLBACK
    assert NarrativeGenerator(make_chat_client(content="")).suggest_drill("Heading") == DRILL_FALLBACK
