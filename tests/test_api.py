"""Tests for the FastAPI application.

WHY: The front end drives every edit through these endpoints; status
codes must distinguish a missing session (404), a draft conflict (409),
and a bad index (422).

HOW: FastAPI TestClient (synchronous, in-process). The module-level
session store is cleared before and after each test.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from sentence_engine.server.app import app, session_store


@pytest.fixture(autouse=True)
def _reset_session_store():
    session_store._sessions.clear()
    yield
    session_store._sessions.clear()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def session_id(client, sample_tagged):
    resp = client.post("/sessions", json={"tagged": sample_tagged})
    assert resp.status_code == 201
    return resp.json()["id"]


class TestParse:

    def test_parse_returns_chunks(self, client, sample_tagged):
        resp = client.post("/parse", json={"tagged": sample_tagged})
        assert resp.status_code == 200
        data = resp.json()
        assert [c["text"] for c in data["chunks"]] == ["The quick fox", "jumps over the dog"]
        assert data["chunks"][0]["segments"][1] == {"text": "quick", "is_verb": True}
        assert data["tagged"] == sample_tagged
        assert data["slash"] == "The quick fox / jumps over the dog"

    def test_parse_nothing_recognized(self, client):
        resp = client.post("/parse", json={"tagged": "plain text"})
        assert resp.status_code == 200
        assert resp.json()["chunks"] == []

    def test_parse_requires_body(self, client):
        assert client.post("/parse", json={}).status_code == 422


class TestSessions:

    def test_create_and_get(self, client, session_id):
        resp = client.get("/sessions/{}".format(session_id))
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_editing"] is False
        assert data["draft"] is None
        assert len(data["committed"]) == 2

    def test_get_unknown(self, client):
        assert client.get("/sessions/nope").status_code == 404

    def test_delete(self, client, session_id):
        assert client.delete("/sessions/{}".format(session_id)).status_code == 204
        assert client.get("/sessions/{}".format(session_id)).status_code == 404

    def test_delete_unknown(self, client):
        assert client.delete("/sessions/nope").status_code == 404

    def test_too_many_sessions(self, client, sample_tagged, monkeypatch):
        monkeypatch.setattr(session_store, "max_sessions", 0)
        resp = client.post("/sessions", json={"tagged": sample_tagged})
        assert resp.status_code == 429


class TestEditCycle:

    def test_split_commit(self, client, session_id):
        base = "/sessions/{}".format(session_id)
        assert client.post(base + "/edit").json()["is_editing"] is True

        resp = client.post(base + "/split", json={"chunk_index": 0, "word_index": 2})
        assert resp.status_code == 200
        data = resp.json()
        assert [c["text"] for c in data["draft"]] == ["The quick", "fox", "jumps over the dog"]
        assert len(data["committed"]) == 2

        data = client.post(base + "/commit").json()
        assert data["is_editing"] is False
        assert data["tagged"] == (
            "<c1>The <v>quick</v></c1> <c2>fox</c2> <c3>jumps <v>over</v> the dog</c3>"
        )

    def test_merge_then_cancel(self, client, session_id, sample_tagged):
        base = "/sessions/{}".format(session_id)
        client.post(base + "/edit")
        data = client.post(base + "/merge", json={"index": 0}).json()
        assert len(data["draft"]) == 1
        data = client.post(base + "/cancel").json()
        assert data["draft"] is None
        assert data["tagged"] == sample_tagged

    def test_toggle_without_edit_changes_committed(self, client, session_id):
        base = "/sessions/{}".format(session_id)
        data = client.post(base + "/toggle-verb", json={"chunk_index": 0, "word_index": 1}).json()
        assert data["tagged"].startswith("<c1>The quick fox</c1>")

    def test_split_without_edit_conflicts(self, client, session_id):
        resp = client.post(
            "/sessions/{}/split".format(session_id),
            json={"chunk_index": 0, "word_index": 1},
        )
        assert resp.status_code == 409

    def test_double_edit_conflicts(self, client, session_id):
        base = "/sessions/{}".format(session_id)
        client.post(base + "/edit")
        assert client.post(base + "/edit").status_code == 409

    def test_commit_without_edit_conflicts(self, client, session_id):
        assert client.post("/sessions/{}/commit".format(session_id)).status_code == 409

    def test_bad_index_is_422(self, client, session_id):
        base = "/sessions/{}".format(session_id)
        client.post(base + "/edit")
        resp = client.post(base + "/split", json={"chunk_index": 9, "word_index": 1})
        assert resp.status_code == 422
        assert "out of range" in resp.json()["detail"]

    def test_edit_unknown_session(self, client):
        assert client.post("/sessions/nope/edit").status_code == 404


class TestHealthAndSchema:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "version": "0.1.0"}

    def test_openapi_lists_endpoints(self, client):
        paths = client.get("/openapi.json").json()["paths"]
        for path in (
            "/parse",
            "/sessions",
            "/sessions/{session_id}",
            "/sessions/{session_id}/split",
            "/sessions/{session_id}/merge",
            "/sessions/{session_id}/toggle-verb",
        ):
            assert path in paths
