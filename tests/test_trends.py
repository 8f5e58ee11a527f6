from datetime import datetime, timezone

import pytest

from pitchperfect_core.assembly import assemble
from pitchperfect_core.drafts import Draft
from pitchperfect_core.models import Player
from pitchperfect_core.skills import SKILL_NAMES, SKILL_TEMPLATE
from pitchperfect_core.trends import (
    HISTORY_COLUMNS,
    compare_to_previous,
    history_long_frame,
    report_history_frame,
    stat_frame,
)


def _player_with_two_cards(narrative):
    player = Player(id="p1", name="Luke")
    first = Draft(season="2025/26", quarter="Autumn Term", skills={n: 3 for n in SKILL_NAMES})
    player, _ = assemble(first, player, narrative, now=datetime(2025, 10, 1, tzinfo=timezone.utc))
    second = Draft(season="2025/26", quarter="Winter Term", skills={n: 3 for n in SKILL_NAMES})
    for name in SKILL_TEMPLATE["Physical"]:
        second.skills[name] = 5
    player, _ = assemble(second, player, narrative, now=datetime(2026, 1, 10, tzinfo=timezone.utc))
    return player


def test_history_frame_is_oldest_first(narrative):
    frame = report_history_frame(_player_with_two_cards(narrative))
    assert list(frame.columns) == HISTORY_COLUMNS
    assert list(frame["label"]) == ["Autumn Term 2025/26 (2025-10-01)", "Winter Term 2025/26 (2026-01-10)"]
    assert list(frame["Physical"]) == [3.0, 5.0]
    assert frame["date"].is_monotonic_increasing


def test_empty_history():
    frame = report_history_frame(Player(id="p2", name="Mason"))
    assert frame.empty
    assert list(frame.columns) == HISTORY_COLUMNS
    assert history_long_frame(Player(id="p2", name="Mason")).empty


def test_long_frame_has_one_row_per_category(narrative):
    long_df = history_long_frame(_player_with_two_cards(narrative))
    assert len(long_df) == 10
    assert set(long_df["category"]) == {"overall", "Technical", "Tactical", "Physical", "Psychological"}


def test_compare_to_previous(narrative):
    deltas = compare_to_previous(_player_with_two_cards(narrative))
    assert deltas["Physical"] == pytest.approx(2.0)
    assert deltas["Technical"] == pytest.approx(0.0)
    # 4 of 22 skills moved from 3 to 5: 74 / 22 = 3.36
    assert deltas["overall"] == pytest.approx(0.4)
    assert compare_to_previous(Player(id="p2", name="Mason"))["overall"] is None


def test_stat_frame(narrative):
    player = _player_with_two_cards(narrative)
    frame = stat_frame(player.latest_report)
    assert len(frame) == 22
    assert set(frame["group"]) == {"Technical", "Tactical", "Physical", "Psychological"}


def test_cards_from_the_same_term_get_separate_points(narrative):
    player = Player(id="p1", name="Luke")
    for day in (1, 1, 20):
        draft = Draft(season="2025/26", quarter="Autumn Term", skills={n: 3 for n in SKILL_NAMES})
        player, _ = assemble(draft, player, narrative, now=datetime(2025, 10, day, tzinfo=timezone.utc))

    frame = report_history_frame(player)

    assert list(frame["label"]) == [
        "Autumn Term 2025/26 (2025-10-01)",
        "Autumn Term 2025/26 (2025-10-01) #2",
        "Autumn Term 2025/26 (2025-10-20)",
    ]
    assert history_long_frame(player)["label"].nunique() == 3
