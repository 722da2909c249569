"""HTTP tests for the lead, assignment and agent routers."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from leadrouter.adapters.memory.store import (
    InMemoryAgentRepository,
    InMemoryAgentStore,
    InMemoryAssignmentRepository,
    InMemoryWorkloadLedger,
)
from leadrouter.adapters.persistence.database import get_session
from leadrouter.infrastructure.api.dependencies import Ports, get_ports
from leadrouter.main import app


class FakeSession:
    def __init__(self):
        self.commits = 0

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        pass


@pytest.fixture
def api(make_agent):
    """TestClient over an in-memory store seeded with two agents."""
    store = InMemoryAgentStore(
        [
            make_agent(1, max_leads=2, min_amount=10_000, max_amount=50_000),
            make_agent(2, max_leads=2, min_amount=0, max_amount=9_999),
        ]
    )
    ports = Ports(
        agents=InMemoryAgentRepository(store),
        ledger=InMemoryWorkloadLedger(store),
        assignments=InMemoryAssignmentRepository(),
    )
    session = FakeSession()

    async def _session():
        yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_ports] = lambda: ports
    client = TestClient(app)
    client.session = session
    yield client
    app.dependency_overrides.clear()


# ─── Leads ──────────────────────────────────────────────────────────


def test_assign_best_agent(api):
    resp = api.post("/api/leads/assign", json={"amount": 5000, "purpose": "personal"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["assigned"] is True
    assert body["agent_id"] == 2
    assert body["strategy"] == "weighted"
    assert body["assignment_id"] == 1
    assert body["reason"] is None
    assert api.session.commits == 1


def test_negative_amount_rejected(api):
    resp = api.post("/api/leads/assign", json={"amount": -5})
    assert resp.status_code == 422


def test_blank_purpose_rejected(api):
    resp = api.post("/api/leads/assign", json={"purpose": "   "})
    assert resp.status_code == 422


def test_round_robin_without_body(api):
    first = api.post("/api/leads/assign/round-robin").json()
    second = api.post("/api/leads/assign/round-robin").json()

    assert (first["agent_id"], second["agent_id"]) == (1, 2)
    assert first["strategy"] == "round_robin"
    assert first["score"] is None


def test_no_agent_available_is_not_an_error(api):
    for _ in range(4):
        assert api.post("/api/leads/assign/round-robin").json()["assigned"] is True

    resp = api.post("/api/leads/assign", json={"amount": 20000})

    assert resp.status_code == 200
    assert resp.json() == {
        "assigned": False,
        "agent_id": None,
        "agent_name": None,
        "score": None,
        "assignment_id": None,
        "assigned_at": None,
        "strategy": "weighted",
        "reason": "no_candidates",
    }


# ─── Assignments ────────────────────────────────────────────────────


def test_complete_releases_once(api):
    assignment_id = api.post("/api/leads/assign", json={"amount": 20000}).json()["assignment_id"]

    first = api.post(f"/api/assignments/{assignment_id}/complete", json={"success": True})
    second = api.post(f"/api/assignments/{assignment_id}/complete", json={"success": True})

    assert first.status_code == 200
    assert first.json()["released"] is True
    assert first.json()["status"] == "converted"
    assert second.json()["released"] is False

    report = api.get("/api/agents/report").json()
    row = next(r for r in report["agents"] if r["agent_id"] == 1)
    assert row["current_leads"] == 0
    assert row["closed_deals"] == 1


def test_complete_unknown_assignment(api):
    resp = api.post("/api/assignments/999/complete", json={"success": False})
    assert resp.status_code == 404


def test_list_assignments_newest_first(api):
    api.post("/api/leads/assign/round-robin")
    api.post("/api/leads/assign/round-robin")

    body = api.get("/api/assignments").json()

    assert body["total"] == 2
    assert [a["id"] for a in body["assignments"]] == [2, 1]
    assert body["assignments"][0]["status"] == "open"


# ─── Agents ─────────────────────────────────────────────────────────


def test_distribution_report(api):
    api.post("/api/leads/assign", json={"amount": 20000})

    report = api.get("/api/agents/report").json()

    assert report["total_agents"] == 2
    assert report["active_agents"] == 2
    assert report["current_leads"] == 1
    assert report["capacity"] == 4
    assert report["utilisation"] == 25.0
    assert {r["agent_id"] for r in report["agents"]} == {1, 2}


def test_reset_daily(api):
    api.post("/api/leads/assign/round-robin")

    resp = api.post("/api/agents/reset-daily")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["agents_reset"] == 2
    report = api.get("/api/agents/report").json()
    assert report["assigned_today"] == 0


def test_reset_monthly(api):
    api.post("/api/leads/assign/round-robin")

    resp = api.post("/api/agents/reset-monthly")

    assert resp.json()["agents_reset"] == 2
    assert api.get("/api/agents/report").json()["assigned_this_month"] == 0


def test_expire_stale_with_nothing_stale(api):
    api.post("/api/leads/assign/round-robin")
    assert api.post("/api/agents/expire-stale").json() == {"status": "ok", "expired": 0}


def test_bare_lead_is_routed_round_robin(api):
    resp = api.post("/api/leads/assign", json={"region": "Sabah", "language": "English"})

    body = resp.json()
    assert body["assigned"] is True
    assert body["strategy"] == "round_robin"
    assert body["score"] is None


def test_lead_hints_recorded_on_assignment(api):
    api.post(
        "/api/leads/assign",
        json={"amount": 20000, "purpose": "business", "region": "Penang", "language": "Chinese"},
    )

    (record,) = api.get("/api/assignments").json()["assignments"]
    assert record["lead_region"] == "Penang"
    assert record["lead_language"] == "Chinese"
    assert record["lead_purpose"] == "business"
    assert record["strategy"] == "weighted"
