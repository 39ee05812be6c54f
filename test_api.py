"""Tests for the draft HTTP API with a mocked Metrix backend."""

import pytest
from fastapi.testclient import TestClient

from metrix_draft.api.dependencies import DraftStore, get_metrix_client
from metrix_draft.clients.metrix import MetrixClient
from metrix_draft.config import Settings, get_settings
from metrix_draft.main import create_app
from metrix_fixtures import GUEST_COMPETITION, metrix_transport


def make_api(transport=None, settings=None) -> TestClient:
    app = create_app()

    async def fake_client():
        client = MetrixClient(Settings(), transport=transport or metrix_transport())
        await client.__aenter__()
        return client

    app.dependency_overrides[get_metrix_client] = fake_client
    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def api():
    DraftStore.clear()
    yield make_api()
    DraftStore.clear()


def create_draft(api, **body):
    response = api.post("/api/drafts/", json={"game_id": "2912345", "seed": 11, **body})
    assert response.status_code == 201, response.text
    return response.json()


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_draft(api):
    draft = create_draft(api)

    assert draft["competition_name"] == "Tuesday Doubles"
    assert draft["state"] == "idle"
    assert draft["anchors_valid"] is True
    assert draft["pool"] == ["101", "102", "103", "106"]
    assert draft["winners"] == []
    tickets = {p["name"]: p["weight"] for p in draft["participants"]}
    assert tickets["Ann Archer"] == 88
    assert draft["total_tickets"] == sum(tickets.values())


def test_get_unknown_draft(api):
    assert api.get("/api/drafts/missing").status_code == 404


def test_spin_until_complete(api):
    draft_id = create_draft(api)["draft_id"]

    winners = []
    for spin_number in range(1, 5):
        response = api.post(f"/api/drafts/{draft_id}/spin")
        assert response.status_code == 200
        result = response.json()
        assert result["spin_number"] == spin_number
        assert result["remaining"] == 4 - spin_number
        trajectory = result["trajectory"]
        assert trajectory["terminal_rotation"] > trajectory["start_rotation"]
        winners.append(result["winner"]["id"])

    assert result["complete"] is True
    assert sorted(winners) == ["101", "102", "103", "106"]

    response = api.post(f"/api/drafts/{draft_id}/spin")
    assert response.status_code == 400

    draft = api.get(f"/api/drafts/{draft_id}").json()
    assert draft["state"] == "complete"
    assert [w["participant_id"] for w in draft["winners"]] == winners
    assert [w["pick_number"] for w in draft["winners"]] == [1, 2, 3, 4]


def test_same_seed_same_order(api):
    orders = []
    for _ in range(2):
        draft_id = create_draft(api, seed=99)["draft_id"]
        orders.append(
            [api.post(f"/api/drafts/{draft_id}/spin").json()["winner"]["id"] for _ in range(4)]
        )
    assert orders[0] == orders[1]


def test_override_participant(api):
    draft_id = create_draft(api)["draft_id"]

    response = api.patch(
        f"/api/drafts/{draft_id}/participants/103", json={"baseline_rating": 1100}
    )
    assert response.status_code == 200
    cat = next(p for p in response.json()["participants"] if p["id"] == "103")
    assert cat["weight"] == 25

    response = api.patch(f"/api/drafts/{draft_id}/participants/101", json={"active": False})
    assert response.json()["pool"] == ["102", "103", "106"]


def test_override_unknown_participant(api):
    draft_id = create_draft(api)["draft_id"]
    response = api.patch(f"/api/drafts/{draft_id}/participants/999", json={"active": False})
    assert response.status_code == 404


def test_override_after_complete_conflicts(api):
    draft_id = create_draft(api)["draft_id"]
    for _ in range(4):
        api.post(f"/api/drafts/{draft_id}/spin")

    response = api.patch(f"/api/drafts/{draft_id}/participants/101", json={"active": True})
    assert response.status_code == 409


def test_restart(api):
    draft_id = create_draft(api)["draft_id"]
    api.post(f"/api/drafts/{draft_id}/spin")

    draft = api.post(f"/api/drafts/{draft_id}/restart").json()
    assert draft["winners"] == []
    assert draft["state"] == "idle"
    assert len(draft["pool"]) == 4


def test_charts(api):
    draft_id = create_draft(api)["draft_id"]

    wheel = api.get(f"/api/drafts/{draft_id}/wheel")
    assert wheel.status_code == 200
    assert "text/html" in wheel.headers["content-type"]
    assert "Ann Archer" in wheel.text

    assert "Ann Archer" in api.get(f"/api/drafts/{draft_id}/tickets").text
    assert "No winners yet" in api.get(f"/api/drafts/{draft_id}/winners").text

    api.post(f"/api/drafts/{draft_id}/spin")
    assert "1. " in api.get(f"/api/drafts/{draft_id}/winners").text


def test_create_draft_with_guest_players(api):
    guests = make_api(metrix_transport(competition=GUEST_COMPETITION))
    response = guests.post("/api/drafts/", json={"game_id": "2912346"})

    assert response.status_code == 201, response.text
    assert response.json()["pool"] == ["101", "guest-2", "guest-3", "guest-4", "guest-5"]


def test_create_draft_from_malformed_competition(api):
    broken = {"Competition": {"Name": "Broken", "Results": [{"UserID": 1, "Sum": 50}]}}
    response = make_api(metrix_transport(competition=broken)).post(
        "/api/drafts/", json={"game_id": "1"}
    )
    assert response.status_code == 502
    assert "Malformed" in response.json()["detail"]


def test_create_draft_unknown_competition(api):
    response = make_api(metrix_transport(competition={})).post(
        "/api/drafts/", json={"game_id": "404"}
    )
    assert response.status_code == 404


def test_delete_draft(api):
    draft_id = create_draft(api)["draft_id"]

    assert api.delete(f"/api/drafts/{draft_id}").status_code == 204
    assert DraftStore.get(draft_id) is None
    assert api.get(f"/api/drafts/{draft_id}").status_code == 404
    assert api.delete(f"/api/drafts/{draft_id}").status_code == 404


def test_store_evicts_oldest_draft(api):
    capped = make_api(settings=Settings(max_drafts=2))
    ids = []
    for _ in range(3):
        response = capped.post("/api/drafts/", json={"game_id": "2912345"})
        assert response.status_code == 201
        ids.append(response.json()["draft_id"])

    assert DraftStore.count() == 2
    assert capped.get(f"/api/drafts/{ids[0]}").status_code == 404
    assert capped.get(f"/api/drafts/{ids[2]}").status_code == 200


def test_root_lists_draft_endpoints(api):
    endpoints = api.get("/").json()["endpoints"]
    assert endpoints["spin"] == "POST /api/drafts/{draft_id}/spin"
    assert "DELETE" in endpoints["draft"]
