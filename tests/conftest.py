import json
from types import SimpleNamespace

import pytest

from pitchperfect_core.drafts import DraftBuffer
from pitchperfect_core.models import Coach, Narrative
from pitchperfect_core.sync import SyncCoordinator
from pitchperfect_store.memory import InMemoryRowStore


@pytest.fixture
def admin_coach():
    return Coach(id="coach_admin", name="Head Coach", email="admin@example.com", password="admin", is_admin=True)


@pytest.fixture
def reds_coach():
    return Coach(
        id="coach_reds",
        name="Reds Coach",
        email="reds@example.com",
        password="pw",
        assigned_teams=("U10 Reds",),
    )


@pytest.fixture
def seeded_store():
    return InMemoryRowStore(
        seed={
            "players": [
                {"id": "p1", "name": "Luke", "branch": "ACADEMY", "teamId": "U10 Reds", "accessCode": "1234"},
                {"id": "p2", "name": "Mason", "branch": "ACADEMY", "teamId": "U10 Blues", "accessCode": "7777"},
                {"id": "p3", "name": "Sarah", "branch": "COACHING", "accessCode": "1111"},
            ],
            "coaches": [
                {"id": "coach_admin", "name": "Head Coach", "email": "admin@example.com", "password": "admin", "isAdmin": True},
                {"id": "coach_reds", "name": "Reds Coach", "email": "reds@example.com", "password": "pw", "assignedTeams": ["U10 Reds", "U10 Blues"]},
            ],
            "teams": [
                {"id": "U10 Reds", "name": "U10 Reds"},
                {"id": "U10 Blues", "name": "U10 Blues"},
            ],
        }
    )


@pytest.fixture
def coordinator(seeded_store):
    coord = SyncCoordinator(seeded_store)
    coord.initial_load()
    return coord


@pytest.fixture
def buffer(admin_coach):
    return DraftBuffer(admin_coach.id)


@pytest.fixture
def narrative():
    return Narrative.model_validate(
        {
            "summary": "A strong term.",
            "strengths": ["x", "y", "z"],
            "improvements": {"keyArea": "Scanning", "buildOnArea": "Left foot"},
        }
    )


@pytest.fixture
def make_chat_client():
    """Factory for chat client doubles exposing ``chat.completions.create``."""

    def _make(content=None, error=None):
        return _fake_chat_client(content, error)

    return _make


def _fake_chat_client(content, error):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    client.calls = calls
    return client


@pytest.fixture
def narrative_json():
    return json.dumps(
        {
            "summary": "Luke had a fantastic term.",
            "strengths": ["Work rate", "Passing", "Speed"],
            "improvements": {"keyArea": "Scanning", "buildOnArea": "Weak foot"},
        }
    )
