"""
Draft API Routes

Endpoints for creating a draft from a Metrix competition, correcting
participants, spinning the wheel and viewing the charts.
"""

import httpx
from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse, Response

from metrix_draft.api.dependencies import (
    DraftRecord,
    DraftRecordDep,
    DraftStore,
    MetrixClientDep,
    SettingsDep,
)
from metrix_draft.clients.metrix import DraftContext, MetrixAPIError
from metrix_draft.errors import (
    DraftStateError,
    EmptyPoolError,
    EmptyPopulationError,
    ParticipantNotFoundError,
)
from metrix_draft.models.draft import (
    CreateDraftRequest,
    DraftView,
    ParticipantOverride,
    SpinResult,
)
from metrix_draft.visualization import charts

router = APIRouter()


def _view(record: DraftRecord) -> DraftView:
    session = record.session
    return DraftView(
        draft_id=record.draft_id,
        competition_name=record.context.name,
        state=session.state,
        rotation=session.rotation,
        anchors_valid=session.ratings.anchors_valid,
        participants=session.roster,
        pool=[p.id for p in session.pool],
        winners=session.winner_entries(),
        total_tickets=session.total_tickets,
    )


@router.post(
    "/",
    response_model=DraftView,
    status_code=201,
    summary="Create a draft",
    description="Fetch a Metrix competition, rate its players and build the wheel.",
)
async def create_draft(
    request: CreateDraftRequest,
    client: MetrixClientDep,
    settings: SettingsDep,
) -> DraftView:
    """Create a draft for a competition."""
    try:
        context = await DraftContext.create(client, request.game_id, request.course_id)
    except MetrixAPIError as e:
        status = 404 if e.status_code is None else 502
        raise HTTPException(status_code=status, detail=e.message)
    except httpx.HTTPError as e:
        raise HTTPException(status_code=502, detail=f"Metrix request failed: {e}")

    record = DraftStore.add(
        context,
        context.new_session(settings),
        seed=request.seed,
        max_drafts=settings.max_drafts,
    )
    return _view(record)


@router.get(
    "/{draft_id}",
    response_model=DraftView,
    summary="Get draft",
    description="Current state, pool, tickets and winners of a draft.",
)
async def get_draft(record: DraftRecordDep) -> DraftView:
    """Get a draft."""
    return _view(record)


@router.delete(
    "/{draft_id}",
    status_code=204,
    summary="Delete draft",
    description="Discard a draft and free its session.",
)
async def delete_draft(record: DraftRecordDep) -> Response:
    """Delete a draft."""
    DraftStore.remove(record.draft_id)
    return Response(status_code=204)


@router.patch(
    "/{draft_id}/participants/{participant_id}",
    response_model=DraftView,
    summary="Override a participant",
    description="Correct a participant's prior rating or include/exclude them from the draw.",
)
async def override_participant(
    participant_id: str,
    override: ParticipantOverride,
    record: DraftRecordDep,
) -> DraftView:
    """Apply a manual override."""
    session = record.session
    try:
        if "baseline_rating" in override.model_fields_set:
            session.set_baseline_rating(participant_id, override.baseline_rating)
        if override.active is not None:
            session.set_active(participant_id, override.active)
    except ParticipantNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except DraftStateError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return _view(record)


@router.post(
    "/{draft_id}/spin",
    response_model=SpinResult,
    summary="Spin the wheel",
    description=(
        "Draw one winner. The response carries the trajectory so the client "
        "can animate the wheel to the terminal rotation."
    ),
)
async def spin(record: DraftRecordDep) -> SpinResult:
    """Run one spin."""
    try:
        result = record.session.spin(record.rng)
    except (EmptyPoolError, EmptyPopulationError) as e:
        raise HTTPException(status_code=400, detail=e.message)
    if result is None:
        raise HTTPException(status_code=409, detail="A spin is already in progress")
    return result


@router.post(
    "/{draft_id}/restart",
    response_model=DraftView,
    summary="Restart the draft",
    description="Start over with the same participants and an empty winners list.",
)
async def restart_draft(record: DraftRecordDep) -> DraftView:
    """Restart a draft."""
    try:
        record.session = record.session.restart()
    except DraftStateError as e:
        raise HTTPException(status_code=409, detail=e.message)
    return _view(record)


@router.get(
    "/{draft_id}/wheel",
    response_class=HTMLResponse,
    summary="Wheel chart",
    description="The wheel at its current rotation.",
)
async def get_wheel_chart(record: DraftRecordDep) -> HTMLResponse:
    """Render the wheel."""
    session = record.session
    html = charts.wheel_chart(
        session.segments, session.rotation, title=record.context.name or "Draft Wheel"
    )
    return HTMLResponse(content=html)


@router.get(
    "/{draft_id}/tickets",
    response_class=HTMLResponse,
    summary="Tickets chart",
    description="Tickets per participant; deselected players are greyed out.",
)
async def get_tickets_chart(record: DraftRecordDep) -> HTMLResponse:
    """Render tickets per participant."""
    return HTMLResponse(content=charts.tickets_chart(record.session.roster))


@router.get(
    "/{draft_id}/winners",
    response_class=HTMLResponse,
    summary="Winners chart",
    description="Winners in the order they were drawn.",
)
async def get_winners_chart(record: DraftRecordDep) -> HTMLResponse:
    """Render the draft order."""
    return HTMLResponse(content=charts.winners_chart(record.session.winner_entries()))
