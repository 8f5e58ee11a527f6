from datetime import datetime, timezone

import pytest

from pitchperfect_core.assembly import assemble, assemble_report_card
from pitchperfect_core.drafts import Draft
from pitchperfect_core.errors import MissingNarrativeError
from pitchperfect_core.models import Improvements, Narrative, Player
from pitchperfect_core.publishing import publish_report
from pitchperfect_core.skills import SKILL_NAMES, create_stats, overall_rating

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _all_fours():
    return Draft(author_coach_id="coach_admin", skills={name: 4 for name in SKILL_NAMES})


def test_overall_rating_is_mean_rounded_to_one_decimal():
    stats = create_stats(
        [4, 4, 3, 5, 4, 4, 3],
        [4, 4, 4, 3, 4],
        [5, 4, 3, 5],
        [5, 5, 5, 4, 4, 5],
    )
    assert len(stats) == 22
    assert overall_rating(stats) == pytest.approx(4.1)


def test_create_stats_rejects_wrong_lengths():
    with pytest.raises(ValueError):
        create_stats([4] * 6, [4] * 5, [4] * 4, [4] * 6)


def test_missing_narrative_blocks_assembly():
    player = Player(id="p1", name="Luke")
    with pytest.raises(MissingNarrativeError):
        assemble(_all_fours(), player, None)


def test_manual_strengths_win_over_narrative(narrative):
    draft = _all_fours()
    draft.strengths = ["Pace", "", "Vision"]
    card = assemble_report_card(draft, narrative, now=FIXED_NOW)
    assert card.strengths == ("Pace", "Vision")


def test_narrative_strengths_used_when_manual_blank(narrative):
    draft = _all_fours()
    draft.strengths = ["", "  "]
    card = assemble_report_card(draft, narrative, now=FIXED_NOW)
    assert card.strengths == ("x", "y", "z")


def test_manual_improvements_win_unless_blank(narrative):
    draft = _all_fours()
    card = assemble_report_card(draft, narrative, now=FIXED_NOW)
    assert card.improvements.key_area == "Scanning"

    draft.key_area = "First touch"
    card = assemble_report_card(draft, narrative, now=FIXED_NOW)
    assert card.improvements.key_area == "First touch"
    assert card.improvements.build_on_area == ""


def test_author_name_is_snapshotted_from_coaches(narrative, admin_coach):
    card = assemble_report_card(_all_fours(), narrative, coaches=[admin_coach], now=FIXED_NOW)
    assert card.author_coach_id == "coach_admin"
    assert card.author_coach_name == "Head Coach"
    assert card.date == FIXED_NOW.isoformat()
    assert card.id.startswith("rc_")


def test_assemble_leaves_input_player_untouched(narrative):
    player = Player(id="p1", name="Luke")
    updated, card = assemble(_all_fours(), player, narrative, now=FIXED_NOW)
    assert player.report_cards == ()
    assert updated.report_cards == (card,)
    second, card2 = assemble(_all_fours(), updated, narrative, now=FIXED_NOW)
    assert second.report_cards[0] is card2
    assert second.report_cards[1] is card
    assert card.id != card2.id


def test_end_to_end_publish(coordinator, buffer, admin_coach):
    assert coordinator.get_player("p1").report_cards == ()
    buffer.select_player("p1")
    for name in SKILL_NAMES:
        buffer.set_stat(name, 4)
    buffer.set_attendance(4, 4)
    buffer.set_ratings_summary(4, 4)
    buffer.set_narrative(
        Narrative(summary="ok", strengths=("a", "b", "c"), improvements=Improvements(key_area="x", build_on_area="y"))
    )

    card, result = publish_report(buffer, coordinator, "p1", admin_coach, now=FIXED_NOW)

    assert result.ok
    assert card.overall_rating == 4.0
    assert card.strengths == ("a", "b", "c")
    assert card.final_summary == "ok"
    assert card.improvements.key_area == "x"
    player = coordinator.get_player("p1")
    assert len(player.report_cards) == 1
    assert player.report_cards[0] == card
    stored = {row["id"]: row for row in coordinator.store.fetch("players")}
    assert stored["p1"]["reportCards"][0]["overallRating"] == 4.0
    assert "p1" not in buffer


def test_publish_without_narrative_changes_nothing(coordinator, buffer, admin_coach):
    buffer.select_player("p1")
    before = coordinator.get_player("p1")
    with pytest.raises(MissingNarrativeError):
        publish_report(buffer, coordinator, "p1", admin_coach)
    assert coordinator.get_player("p1") == before
    assert "p1" in buffer
