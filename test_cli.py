"""Tests for CLI helpers."""

import asyncio
import io

import httpx
import pytest

from metrix_draft.cli import (
    TerminalSink,
    apply_overrides,
    load_context,
    parse_rating_overrides,
)
from metrix_draft.clients.metrix import MetrixClient
from metrix_draft.config import Settings
from metrix_draft.models.participant import Participant, RatingAnchors
from metrix_draft.services.draft import DraftSession
from metrix_draft.services.ratings import RatingService
from metrix_draft.services.wheel import partition
from metrix_fixtures import metrix_transport


def make_session():
    ratings = RatingService(
        RatingAnchors(rating_low=950, result_low=54, rating_high=1000, result_high=50)
    )
    roster = ratings.rate_all(
        [
            Participant(id="1", name="Ann Archer", raw_score=52, baseline_rating=900),
            Participant(id="2", name="Ben Baker", raw_score=54),
        ]
    )
    return DraftSession(roster, ratings, settings=Settings())


def test_parse_rating_overrides():
    assert parse_rating_overrides(["Ann Archer=912", "Ben=Baker=1000", "Cat="]) == {
        "Ann Archer": 912.0,
        "Ben=Baker": 1000.0,
        "Cat": 0.0,
    }


@pytest.mark.parametrize("value", ["Ann Archer", "=912", "Ann=abc"])
def test_parse_rating_overrides_rejects_bad_pairs(value):
    with pytest.raises(ValueError):
        parse_rating_overrides([value])


def test_apply_overrides():
    session = make_session()
    unknown = apply_overrides(session, ["Ann Archer", "Nobody"], {"Ben Baker": 1000, "Ghost": 1})

    assert unknown == ["Ghost", "Nobody"]
    assert [p.name for p in session.pool] == ["Ben Baker"]
    assert session.get_participant("2").weight == 38


def test_terminal_sink_shows_name_under_pointer():
    session = make_session()
    stream = io.StringIO()
    sink = TerminalSink(stream)

    sink.render_frame(partition(session.pool), 0.0)
    # Ann holds [0, 2π·88/138), Ben the rest; pointer at 3π/2 sits in Ben's arc
    assert "Ben Baker" in stream.getvalue()


def load_with(transport, game_id="2912345"):
    async def main():
        async with MetrixClient(Settings(), transport=transport) as client:
            return await load_context(client, game_id)

    return asyncio.run(main())


def test_load_context():
    ctx = load_with(metrix_transport())
    assert ctx.name == "Tuesday Doubles"


def test_load_context_unknown_competition_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        load_with(metrix_transport(competition={}), game_id="404")

    assert exc_info.value.code == 1
    assert "❌ Competition not found: 404" in capsys.readouterr().out


def test_load_context_network_failure_exits(capsys):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SystemExit) as exc_info:
        load_with(httpx.MockTransport(handler))

    assert exc_info.value.code == 1
    assert "❌ Metrix request failed: connection refused" in capsys.readouterr().out
