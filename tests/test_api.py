"""
BALLOT v1.0 - API Tests.

Tests for the FastAPI host over an in-memory store.
"""

import pytest
from fastapi.testclient import TestClient

from ballot import config

CHAIR = {"X-Caller-Id": "chair"}
ALICE = {"X-Caller-Id": "alice"}


@pytest.fixture
def client(monkeypatch):
    """Test client with a fresh in-memory ballot per test."""
    monkeypatch.setenv("BALLOT_STORAGE", "memory")
    config.reload()

    from ballot.api import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def ballot_client(client):
    resp = client.post("/v1/ballot/init", json={"proposals": ["A", "B", "C"]}, headers=CHAIR)
    assert resp.status_code == 200
    resp = client.post("/v1/ballot/rights", json={"voter": "alice"}, headers=CHAIR)
    assert resp.status_code == 200
    return client


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_caller_header_required(client):
    resp = client.post("/v1/ballot/init", json={"proposals": ["A"]})
    assert resp.status_code == 401


def test_calls_before_init(client):
    resp = client.post("/v1/ballot/rights", json={"voter": "alice"}, headers=CHAIR)
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_initialized"


def test_delegate_vote_winner_flow(ballot_client):
    resp = ballot_client.post("/v1/ballot/delegate", json={"to": "chair"}, headers=ALICE)
    assert resp.status_code == 200
    assert resp.json()["delegate"] == "chair"

    resp = ballot_client.get("/v1/ballot/voters/chair")
    assert resp.json()["weight"] == 2

    resp = ballot_client.post("/v1/ballot/vote", json={"proposal": 1}, headers=CHAIR)
    assert resp.status_code == 200
    assert resp.json() == {"caller": "chair", "action": "vote", "status": "committed"}

    resp = ballot_client.get("/v1/ballot/winner")
    assert resp.json() == {"index": 1, "name": "B"}

    resp = ballot_client.get("/v1/ballot/proposals")
    assert [p["vote_count"] for p in resp.json()] == [0, 2, 0]

    resp = ballot_client.get("/v1/ballot/status")
    body = resp.json()
    assert body["total_votes"] == 2
    assert body["voted"] == 2
    assert body["winner"] == "B"


def test_no_winner(ballot_client):
    resp = ballot_client.get("/v1/ballot/winner")
    assert resp.status_code == 200
    assert resp.json() == {"index": None, "name": None}


@pytest.mark.parametrize(
    "path, payload, headers, status, code",
    [
        ("/v1/ballot/rights", {"voter": "bob"}, ALICE, 403, "unauthorized"),
        ("/v1/ballot/init", {"proposals": ["X"]}, CHAIR, 409, "already_initialized"),
        ("/v1/ballot/vote", {"proposal": 3}, CHAIR, 422, "invalid_proposal_index"),
        ("/v1/ballot/vote", {"proposal": 0}, {"X-Caller-Id": "bob"}, 422, "no_voting_right"),
        ("/v1/ballot/delegate", {"to": "alice"}, ALICE, 422, "self_delegation"),
        ("/v1/ballot/delegate", {"to": "nobody"}, ALICE, 422, "delegate_has_no_right"),
    ],
)
def test_error_kinds(ballot_client, path, payload, headers, status, code):
    resp = ballot_client.post(path, json=payload, headers=headers)
    assert resp.status_code == status
    assert resp.json()["code"] == code


def test_double_vote_conflict(ballot_client):
    ballot_client.post("/v1/ballot/vote", json={"proposal": 0}, headers=ALICE)
    resp = ballot_client.post("/v1/ballot/vote", json={"proposal": 1}, headers=ALICE)
    assert resp.status_code == 409
    assert resp.json()["code"] == "already_voted"


def test_delegation_cycle_conflict(ballot_client):
    ballot_client.post("/v1/ballot/delegate", json={"to": "chair"}, headers=ALICE)
    resp = ballot_client.post("/v1/ballot/delegate", json={"to": "alice"}, headers=CHAIR)
    assert resp.status_code == 409
    assert resp.json()["code"] == "delegation_cycle"


def test_unknown_voter(ballot_client):
    resp = ballot_client.get("/v1/ballot/voters/nobody")
    assert resp.status_code == 404


def test_ledger_verify(ballot_client):
    resp = ballot_client.get("/v1/ballot/ledger/verify")
    assert resp.status_code == 200
    assert resp.json() == {"valid": True, "violations": [], "transactions_checked": 2}


def test_winner_index_and_name_from_one_tally_read(ballot_client, monkeypatch):
    engine = ballot_client.app.state.engine
    ballot_client.post("/v1/ballot/vote", json={"proposal": 0}, headers=ALICE)

    original = engine.store.iter_proposals
    reads = []

    def read_then_outvote():
        proposals = list(original())
        if not reads:
            # B overtakes A right after the first read of the tally.
            engine.give_right_to_vote("chair", "bob")
            engine.delegate("bob", "chair")
            engine.vote("chair", 1)
        reads.append(proposals)
        return iter(proposals)

    monkeypatch.setattr(engine.store, "iter_proposals", read_then_outvote)

    resp = ballot_client.get("/v1/ballot/winner")
    assert resp.json() == {"index": 0, "name": "A"}

    resp = ballot_client.get("/v1/ballot/winner")
    assert resp.json() == {"index": 1, "name": "B"}
