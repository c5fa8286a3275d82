"""Tests for sessions API router."""

import pytest
from fastapi.testclient import TestClient

from skillscout.api import create_app
from skillscout.core.context import SharedContext
from skillscout.utils.config import Config


@pytest.fixture
def context(test_config: Config) -> SharedContext:
    return SharedContext(test_config)


@pytest.fixture
def client(context: SharedContext):
    app = create_app(context)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def session_id(client) -> str:
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


class TestSessionLifecycle:
    def test_list_sessions_empty(self, client):
        """GET /sessions is empty before any session is created."""
        response = client.get("/sessions")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_and_get(self, client, session_id):
        """A created session starts empty and is listed."""
        response = client.get(f"/sessions/{session_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["consumed_budget"] == 0
        assert data["loaded_skill_ids"] == []
        assert client.get("/sessions").json() == [session_id]

    def test_get_unknown_404(self, client):
        """Unknown session ids return 404."""
        assert client.get("/sessions/nope").status_code == 404

    def test_delete(self, client, session_id):
        """DELETE ends a session; deleting again returns 404."""
        response = client.delete(f"/sessions/{session_id}")

        assert response.status_code == 204
        assert client.get(f"/sessions/{session_id}").status_code == 404
        assert client.delete(f"/sessions/{session_id}").status_code == 404


class TestResolve:
    def test_progressive_disclosure(self, client, session_id):
        """A follow-up request adds a reference and reports the overview as cached."""
        first = client.post(
            f"/sessions/{session_id}/resolve",
            json={"text": "interchangeable", "budget": 10},
        ).json()

        assert [m["skill_id"] for m in first["matches"]] == ["strategy"]
        assert [b["kind"] for b in first["content"]["blocks"]] == ["overview"]
        assert first["content"]["consumed_budget"] == 4

        second = client.post(
            f"/sessions/{session_id}/resolve",
            json={
                "text": "interchangeable",
                "reference_hints": ["examples"],
                "budget": 10,
            },
        ).json()

        blocks = second["content"]["blocks"]
        assert [(b["kind"], b["cache_hit"]) for b in blocks] == [
            ("overview", True),
            ("reference", False),
        ]
        assert blocks[1]["reference_path"] == "references/examples.md"
        assert second["content"]["consumed_budget"] == 7

        info = client.get(f"/sessions/{session_id}").json()
        assert info["loaded_skill_ids"] == ["strategy"]
        assert info["loaded_reference_paths"] == ["strategy:references/examples.md"]

    def test_budget_exceeded(self, client, session_id):
        """An item that does not fit is reported as pending, not returned."""
        response = client.post(
            f"/sessions/{session_id}/resolve",
            json={"text": "interchangeable", "budget": 2},
        )

        assert response.status_code == 200
        content = response.json()["content"]
        assert content["budget_exceeded"] is True
        assert content["pending"] == "strategy"
        assert content["pending_cost"] == 4
        assert content["blocks"] == []

    def test_invalid_budget_rejected(self, client, session_id):
        """A non-positive budget fails request validation."""
        response = client.post(
            f"/sessions/{session_id}/resolve", json={"text": "x", "budget": 0}
        )

        assert response.status_code == 422

    def test_unknown_session_404(self, client):
        """Resolving in an unknown session returns 404."""
        response = client.post("/sessions/nope/resolve", json={"text": "x"})

        assert response.status_code == 404

    def test_stale_session_conflicts(self, client, context, session_id):
        """A session from an older corpus generation returns 409."""
        session = context.sessions.get(session_id)
        context.generation += 1
        context._install(context.corpus)

        response = client.post(
            f"/sessions/{session_id}/resolve", json={"text": "interchangeable"}
        )

        assert response.status_code == 409
        assert session.consumed_budget == 0

    def test_reset(self, client, session_id):
        """POST reset clears loaded items and consumed budget."""
        client.post(f"/sessions/{session_id}/resolve", json={"text": "interchangeable"})

        response = client.post(f"/sessions/{session_id}/reset")

        assert response.status_code == 200
        assert response.json()["consumed_budget"] == 0
        assert response.json()["loaded_skill_ids"] == []
