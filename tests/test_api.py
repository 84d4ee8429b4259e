"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from api_server import dependencies
from api_server.dependencies import get_orchestrator, get_store
from api_server.main import app
from api_server.middleware.rate_limit import limiter
from coach_debate import DebateOrchestrator, GenerationError, SQLiteTurnStore
from conftest import StubGenerator


@pytest.fixture
def generator():
    return StubGenerator("X", "Y")


@pytest.fixture
def client(store, generator, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)
    orchestrator = DebateOrchestrator(store, generator, topics=["Pool topic"])
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["turns"] == 0
    assert "X-Request-ID" in r.headers


def test_full_debate_flow(client, generator):
    r = client.post("/debate/start", json={"topic": "T"})
    assert r.status_code == 201
    assert r.json()["persona"] == "CrossFit"
    assert r.json()["message"] == "T"

    r = client.post("/debate/continue")
    assert r.status_code == 200
    assert r.json()["persona"] == "HEROS"
    assert r.json()["message"] == "X"
    assert generator.calls[0]["context"] == "CrossFit: T"

    r = client.get("/debate/state")
    assert r.json() == {
        "active_topic": "T",
        "next_persona": "CrossFit",
        "last_message": "X",
        "last_persona": "HEROS",
        "turn_count": 2,
    }


def test_start_without_body_uses_pool(client):
    r = client.post("/debate/start")
    assert r.status_code == 201
    assert r.json()["topic"] == "Pool topic"


def test_continue_without_debate_is_conflict(client):
    r = client.post("/debate/continue")
    assert r.status_code == 409
    assert r.json()["error"] == "NoActiveDebateError"


def test_generation_failure_is_bad_gateway(client, generator, store):
    generator.replies = [GenerationError("LLM down")]
    client.post("/debate/start", json={"topic": "T"})
    r = client.post("/debate/continue")
    assert r.status_code == 502
    assert store.count("T") == 1


def test_rate_limited_generation_sets_retry_after(client, generator):
    generator.replies = [GenerationError("slow down", retry_after=60)]
    client.post("/debate/start", json={"topic": "T"})
    r = client.post("/debate/continue")
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "60"


def test_list_turns_grouped(client):
    client.post("/debate/start", json={"topic": "A"})
    client.post("/debate/start", json={"topic": "B"})
    client.post("/debate/continue")

    r = client.get("/debate/turns")
    assert r.status_code == 200
    threads = r.json()
    assert [t["topic"] for t in threads] == ["B", "A"]
    assert [t["persona"] for t in threads[0]["turns"]] == ["CrossFit", "HEROS"]

    r = client.get("/debate/turns", params={"topic": "A"})
    assert [t["topic"] for t in r.json()] == ["A"]


def test_edit_earlier_turn_returns_thread_with_follow_up(client):
    seed = client.post("/debate/start", json={"topic": "T"}).json()
    client.post("/debate/continue")

    r = client.put(f"/debate/turns/{seed['id']}", json={"message": "T edited"})
    assert r.status_code == 200
    body = r.json()
    assert body["turn"]["message"] == "T edited"
    assert [t["message"] for t in body["turns"]] == ["T edited", "X", "Y"]
    assert body["turns"][-1]["persona"] == "HEROS"


def test_edit_validation(client):
    seed = client.post("/debate/start", json={"topic": "T"}).json()
    r = client.put(f"/debate/turns/{seed['id']}", json={"message": ""})
    assert r.status_code == 422


def test_get_and_delete_turn(client):
    seed = client.post("/debate/start", json={"topic": "T"}).json()
    assert client.get(f"/debate/turns/{seed['id']}").json()["message"] == "T"

    r = client.delete(f"/debate/turns/{seed['id']}")
    assert r.json() == {"deleted": True}
    assert client.get(f"/debate/turns/{seed['id']}").status_code == 404
    assert client.delete(f"/debate/turns/{seed['id']}").status_code == 404

    r = client.post("/debate/continue")
    assert r.status_code == 409
    assert r.json()["error"] == "NoPriorTurnError"


def test_reset_all_and_reconstruct(client):
    client.post("/debate/start", json={"topic": "A"})
    client.post("/debate/start", json={"topic": "B"})
    client.post("/debate/continue")

    r = client.post("/debate/reset")
    assert r.json() == {"deleted_count": 3}

    r = client.post("/debate/reconstruct")
    assert r.json()["active_topic"] == ""
    assert r.json()["next_persona"] == "CrossFit"


def test_reset_single_topic(client):
    client.post("/debate/start", json={"topic": "A"})
    client.post("/debate/start", json={"topic": "B"})
    r = client.post("/debate/reset", json={"topic": "A"})
    assert r.json() == {"deleted_count": 1}
    assert [t["topic"] for t in client.get("/debate/turns").json()] == ["B"]


@pytest.fixture
def keyless_client(store, monkeypatch):
    """Real orchestrator wiring, with no Groq API key configured"""
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.setattr(limiter, "enabled", False)
    monkeypatch.setattr(dependencies, "_orchestrator", None)
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def test_routes_without_llm_work_without_api_key(keyless_client):
    r = keyless_client.get("/debate/state")
    assert r.status_code == 200
    assert r.json()["active_topic"] == ""

    seed = keyless_client.post("/debate/start", json={"topic": "T"})
    assert seed.status_code == 201
    assert keyless_client.post("/debate/reconstruct").json()["turn_count"] == 1
    assert keyless_client.delete(f"/debate/turns/{seed.json()['id']}").json() == {"deleted": True}
    assert keyless_client.post("/debate/reset").status_code == 200


def test_generating_without_api_key_is_unauthorized(keyless_client, store):
    keyless_client.post("/debate/start", json={"topic": "T"})
    r = keyless_client.post("/debate/continue")
    assert r.status_code == 401
    assert r.json()["error"] == "APIKeyError"
    assert store.count("T") == 1


def test_health_degraded_when_store_fails(db_path, monkeypatch):
    broken = SQLiteTurnStore(db_path)
    broken.close()
    monkeypatch.setattr(limiter, "enabled", False)
    app.dependency_overrides[get_store] = lambda: broken
    try:
        with TestClient(app) as c:
            r = c.get("/health")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 200
    assert r.json()["status"] == "degraded"
    assert r.json()["turns"] is None


def test_json_formatter_merges_request_fields():
    import json
    import logging

    from api_server.middleware.logging import JSONFormatter

    record = logging.LogRecord("api_server", logging.INFO, __file__, 1, 'said "%s"', ("hi",), None)
    record.status = 201
    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == 'said "hi"'
    assert entry["status"] == 201
    assert entry["level"] == "INFO"
