"""Tests for the stateless query router."""

import pytest
from fastapi.testclient import TestClient

from skillscout.api import create_app
from skillscout.core.context import SharedContext
from skillscout.utils.config import Config


@pytest.fixture
def client(test_config: Config):
    app = create_app(SharedContext(test_config))
    with TestClient(app) as client:
        yield client


def test_ranks_matches(client):
    """POST /query ranks skills by keyword overlap."""
    response = client.post("/query", json={"text": "interchangeable algorithm"})

    assert response.status_code == 200
    data = response.json()
    assert [m["skill_id"] for m in data] == ["strategy"]
    assert data[0]["score"] == pytest.approx(2 / 3)
    assert data[0]["hinted"] is False


def test_hint_and_slash_mention(client):
    """Skill hints and /mentions are both treated as explicit hints."""
    response = client.post(
        "/query", json={"text": "use /strategy here", "skill_hints": ["state"]}
    )

    assert response.status_code == 200
    assert [(m["skill_id"], m["hinted"]) for m in response.json()] == [
        ("state", True),
        ("strategy", True),
    ]


def test_no_match_is_empty_list(client):
    """No overlap yields an empty list, not an error."""
    response = client.post("/query", json={"text": "database migrations"})

    assert response.status_code == 200
    assert response.json() == []


def test_query_does_not_create_sessions(client):
    """Stateless queries leave no session behind."""
    client.post("/query", json={"text": "interchangeable"})

    assert client.get("/sessions").json() == []
