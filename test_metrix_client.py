"""Tests for the Metrix client and draft context, against a mocked API."""

import asyncio
import random

import pytest

from metrix_draft.clients.metrix import (
    DraftContext,
    MetrixAPIError,
    MetrixClient,
    extract_anchors,
    participant_ids,
)
from metrix_draft.config import Settings
from metrix_draft.models import CompetitionResult
from metrix_draft.models.draft import DraftState
from metrix_fixtures import (
    COURSE,
    COURSE_WITH_TRACKS,
    GUEST_COMPETITION,
    metrix_transport,
)


def run_with_client(transport, func):
    async def main():
        async with MetrixClient(Settings(), transport=transport) as client:
            return await func(client)

    return asyncio.run(main())


def test_client_requires_context_manager():
    with pytest.raises(RuntimeError):
        MetrixClient(Settings()).client


def test_get_competition_parses_results():
    transport = metrix_transport()
    competition = run_with_client(transport, lambda c: c.get_competition("2912345"))

    assert competition.name == "Tuesday Doubles"
    assert competition.course_id == "4711"
    assert len(competition.results) == 6
    assert competition.results[0].user_id == "101"
    assert competition.results[1].score == 54.0

    request = transport.requests[0]
    assert request.url.path == "/api.php"
    assert request.url.params["content"] == "result"
    assert request.url.params["id"] == "2912345"


def test_dnf_results_are_dropped():
    competition = run_with_client(metrix_transport(), lambda c: c.get_competition("1"))
    names = [r.name for r in competition.finished_results]
    assert names == ["Ann Archer", "Ben Baker", "Cat Cole", "Fay Ford"]


def test_missing_competition_returns_none():
    transport = metrix_transport(competition={"Errors": ["not found"]})
    assert run_with_client(transport, lambda c: c.get_competition("1")) is None


def test_server_error_raises():
    transport = metrix_transport(status_code=500)
    with pytest.raises(MetrixAPIError) as exc_info:
        run_with_client(transport, lambda c: c.get_competition("1"))
    assert exc_info.value.status_code == 500


def test_course_anchors_from_course_wrapper():
    anchors = run_with_client(metrix_transport(), lambda c: c.get_course_anchors("4711"))
    assert anchors.is_valid
    assert (anchors.rating_low, anchors.result_low) == (950.0, 54.0)
    assert (anchors.rating_high, anchors.result_high) == (1000.0, 50.0)


def test_course_anchors_without_course_id_skip_request():
    transport = metrix_transport()
    anchors = run_with_client(transport, lambda c: c.get_course_anchors(None))
    assert not anchors.is_valid
    assert transport.requests == []


def test_extract_anchors_shapes():
    assert extract_anchors(COURSE).is_valid
    assert extract_anchors(COURSE_WITH_TRACKS).is_valid
    assert extract_anchors(COURSE["course"]).is_valid


@pytest.mark.parametrize(
    "payload",
    [{}, {"course": {"Name": "x"}}, {"Tracks": []}, {"Tracks": [{"Name": "x"}]}, [], "nope"],
)
def test_extract_anchors_fails_closed(payload):
    assert not extract_anchors(payload).is_valid


def test_bagtag_ratings_skip_unknown_and_malformed():
    ratings = run_with_client(metrix_transport(), lambda c: c.get_bagtag_ratings())
    assert ratings == {"Ann Archer": 900.0, "Ben Baker": 1000.0, "Someone Else": 870.0}


def test_draft_context_rates_participants():
    async def create(client):
        return await DraftContext.create(client, "2912345", rng=random.Random(1))

    ctx = run_with_client(metrix_transport(), create)

    by_name = {p.name: p for p in ctx.participants}
    assert list(by_name) == ["Ann Archer", "Ben Baker", "Cat Cole", "Fay Ford"]

    ann = by_name["Ann Archer"]
    assert (ann.id, ann.derived_rating, ann.baseline_rating, ann.weight) == ("101", 975, 900.0, 88)
    # 950 against 1000
    assert by_name["Ben Baker"].weight == 38
    # no bag-tag rating -> unknown -> 50
    assert by_name["Cat Cole"].weight == 50
    # zero bag-tag rating is unknown as well
    assert by_name["Fay Ford"].baseline_rating is None
    assert by_name["Fay Ford"].derived_rating == 925
    assert all(p.color.startswith("hsl(") for p in ctx.participants)


def test_draft_context_explicit_course_id():
    transport = metrix_transport()

    async def create(client):
        return await DraftContext.create(client, "2912345", course_id="999")

    run_with_client(transport, create)
    course_requests = [r for r in transport.requests if r.url.params["content"] == "course"]
    assert course_requests[0].url.params["id"] == "999"


def test_draft_context_without_anchors_uses_baselines():
    transport = metrix_transport(course={"Name": "No ratings"})

    async def create(client):
        return await DraftContext.create(client, "2912345")

    ctx = run_with_client(transport, create)
    assert not ctx.anchors.is_valid

    session = ctx.new_session(Settings())
    # Ann and Ben have bag-tag ratings; Cat and Fay do not and sit out
    assert [p.name for p in session.pool] == ["Ann Archer", "Ben Baker"]
    assert [p.name for p in session.bench] == ["Cat Cole", "Fay Ford"]
    assert session.state == DraftState.IDLE


def test_draft_context_unknown_competition():
    transport = metrix_transport(competition={})

    async def create(client):
        return await DraftContext.create(client, "404")

    with pytest.raises(MetrixAPIError):
        run_with_client(transport, create)


def test_guest_results_parse_without_user_id():
    transport = metrix_transport(competition=GUEST_COMPETITION)
    competition = run_with_client(transport, lambda c: c.get_competition("2912346"))
    assert [r.user_id for r in competition.results] == ["101", None, None, None, "101"]


def test_participant_ids_fill_missing_and_repeated():
    results = [
        CompetitionResult(UserID=101, Name="Ann Archer", Sum=52),
        CompetitionResult(Name="Guest One", Sum=55),
        CompetitionResult(UserID="guest-4", Name="Odd Name", Sum=60),
        CompetitionResult(Name="Guest Two", Sum=57),
        CompetitionResult(UserID=101, Name="Ann Archer", Sum=51),
    ]

    assert participant_ids(results) == ["101", "guest-2", "guest-4", "guest-4-4", "guest-5"]


def test_draft_context_with_guests_builds_session():
    async def create(client):
        return await DraftContext.create(client, "2912346")

    ctx = run_with_client(metrix_transport(competition=GUEST_COMPETITION), create)

    ids = [p.id for p in ctx.participants]
    assert ids == ["101", "guest-2", "guest-3", "guest-4", "guest-5"]
    session = ctx.new_session(Settings())
    assert len(session.pool) == 5


def test_malformed_competition_raises():
    competition = {"Competition": {"Name": "Broken", "Results": [{"UserID": 1, "Sum": 50}]}}
    transport = metrix_transport(competition=competition)

    with pytest.raises(MetrixAPIError, match="Malformed"):
        run_with_client(transport, lambda c: c.get_competition("1"))
