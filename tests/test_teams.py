from pitchperfect_core.models import Team
from pitchperfect_core.teams import bulk_team_names, new_teams, split_list
from pitchperfect_store.base import TEAMS


def test_split_list_trims_and_drops_blanks():
    assert split_list(" U9, U10 ,, U11 ,U10") == ["U9", "U10", "U11"]
    assert split_list("") == []
    assert split_list(None) == []


def test_every_age_gets_every_suffix():
    assert bulk_team_names("U9, U10", "Reds, Blues") == ["U9 Reds", "U9 Blues", "U10 Reds", "U10 Blues"]


def test_one_field_alone_gives_the_names():
    assert bulk_team_names("U9, U10", " ") == ["U9", "U10"]
    assert bulk_team_names("", "Reds") == ["Reds"]
    assert bulk_team_names("", "") == []


def test_existing_and_repeated_names_are_skipped():
    existing = [Team(id="U10 Reds", name="U10 Reds")]
    teams = new_teams(["U10 Reds", "U10 Blues", "U10 Blues", "U11 Reds"], existing)
    assert [t.id for t in teams] == ["U10 Blues", "U11 Reds"]
    assert all(t.id == t.name for t in teams)


def test_coordinator_creates_only_new_teams(coordinator, seeded_store):
    results = coordinator.create_teams(bulk_team_names("U10, U11", "Reds, Blues"))

    assert [r.record_id for r in results] == ["U11 Reds", "U11 Blues"]
    assert all(r.ok for r in results)
    assert {t.id for t in coordinator.teams} == {"U10 Reds", "U10 Blues", "U11 Reds", "U11 Blues"}
    assert {row["id"] for row in seeded_store.fetch(TEAMS)} == {"U10 Reds", "U10 Blues", "U11 Reds", "U11 Blues"}
    assert coordinator.create_teams(["U11 Reds"]) == []
