import pytest

from pitchperfect_core.models import SCHEMA_VERSION, UNASSIGNED_TEAM_ID, Branch
from pitchperfect_core.sanitizer import sanitize_player, sanitize_report_card


def _legacy_player(**overrides):
    raw = {
        "id": "p9",
        "name": "Legacy Lad",
        "branch": "ACADEMY",
        "teamId": "U10 Reds",
        "accessCode": "0000",
        "reportCards": [
            {
                "id": "rc_old",
                "season": "2023/24",
                "quarter": "Q1",
                "date": "2023-10-01",
                "attendance": {"attendanceScore": 8, "commitmentScore": 10},
                "stats": [
                    {"name": "Ball Mastery", "group": "Technical", "value": 80, "fullMark": 100},
                    {"name": "Focus", "group": "Psychological", "value": 4, "fullMark": 5},
                    {"name": "Strength", "group": "Physical", "value": 50, "fullMark": 100},
                ],
                "ratingsSummary": {"applicationScore": 9, "behaviourScore": 3},
                "overallRating": 82,
                "strengths": ["Pace"],
                "improvements": ["Heading", "Left foot"],
                "coachNotes": "Old notes text",
            }
        ],
    }
    raw.update(overrides)
    return raw


def test_legacy_skill_values_are_rescaled_to_five():
    card = sanitize_player(_legacy_player()).report_cards[0]
    values = {s.name: s.value for s in card.stats}
    assert values["Ball Mastery"] == 4
    assert values["Focus"] == 4
    # 50 / 20 = 2.5 rounds half up
    assert values["Strength"] == 3
    assert all(s.full_mark == 5 for s in card.stats)


def test_legacy_attendance_and_ratings_are_rescaled():
    card = sanitize_player(_legacy_player()).report_cards[0]
    assert card.attendance.attendance_score == 4
    assert card.attendance.commitment_score == 5
    assert card.ratings_summary.application_score == 5
    assert card.ratings_summary.behaviour_score == 3


def test_legacy_overall_rating_is_rescaled():
    card = sanitize_player(_legacy_player()).report_cards[0]
    assert card.overall_rating == pytest.approx(4.1)


def test_legacy_improvements_list_and_notes_are_mapped():
    card = sanitize_player(_legacy_player()).report_cards[0]
    assert card.improvements.key_area == "Heading"
    assert card.improvements.build_on_area == "Left foot"
    assert card.final_summary == "Old notes text"
    assert card.targets == ()
    assert card.coach_footer_note == ""


def test_missing_scores_get_defaults():
    raw = _legacy_player()
    card_raw = raw["reportCards"][0]
    del card_raw["attendance"]
    del card_raw["ratingsSummary"]
    del card_raw["overallRating"]
    card = sanitize_player(raw).report_cards[0]
    assert card.attendance.attendance_score == 4
    assert card.ratings_summary.behaviour_score == 4
    # derived from the rescaled stats: (4 + 4 + 3) / 3
    assert card.overall_rating == pytest.approx(3.7)


def test_sanitize_is_idempotent():
    once = sanitize_player(_legacy_player())
    twice = sanitize_player(once)
    assert twice == once
    assert sanitize_player(once.to_wire()) == once


def test_current_scale_values_pass_through():
    card = sanitize_report_card(
        {
            "stats": [{"name": "Focus", "group": "Psychological", "value": 4}],
            "attendance": {"attendanceScore": 4, "commitmentScore": 4},
            "ratingsSummary": {"applicationScore": 4, "behaviourScore": 4},
            "overallRating": 4.0,
        }
    )
    assert card["stats"][0]["value"] == 4
    assert card["attendance"]["attendanceScore"] == 4
    assert card["overallRating"] == 4.0
    assert card["id"] == "rc_legacy_0"


def test_coaching_player_loses_team_id():
    player = sanitize_player(_legacy_player(branch="COACHING"))
    assert player.branch is Branch.COACHING
    assert player.team_id is None


def test_team_id_falls_back_to_age_group_then_unassigned():
    raw = _legacy_player(ageGroup="U12 Greens")
    del raw["teamId"]
    assert sanitize_player(raw).team_id == "U12 Greens"

    raw = _legacy_player()
    del raw["teamId"]
    assert sanitize_player(raw).team_id == UNASSIGNED_TEAM_ID


def test_unknown_branch_defaults_to_academy_and_version_is_stamped():
    player = sanitize_player(_legacy_player(branch="MYSTERY"))
    assert player.branch is Branch.ACADEMY
    assert player.schema_version == SCHEMA_VERSION


def test_jersey_number_is_left_alone():
    player = sanitize_player(_legacy_player(jerseyNumber=7))
    assert player.jersey_number == 7


@pytest.mark.parametrize("bad", ["NaN", "inf", float("nan"), float("-inf")])
def test_non_finite_legacy_values_fall_back_to_defaults(bad):
    raw = _legacy_player()
    card_raw = raw["reportCards"][0]
    card_raw["stats"][0]["value"] = bad
    card_raw["attendance"]["attendanceScore"] = bad
    card_raw["ratingsSummary"]["behaviourScore"] = bad
    card_raw["overallRating"] = bad

    card = sanitize_player(raw).report_cards[0]

    values = {s.name: s.value for s in card.stats}
    assert values["Ball Mastery"] == 3
    assert card.attendance.attendance_score == 4
    assert card.ratings_summary.behaviour_score == 4
    # derived from the stats: (3 + 4 + 3) / 3
    assert card.overall_rating == pytest.approx(3.3)
