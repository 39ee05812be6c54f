"""Pydantic models and schemas."""

from metrix_draft.models.draft import (
    CreateDraftRequest,
    DraftState,
    DraftView,
    ParticipantOverride,
    SpinResult,
    WinnerEntry,
)
from metrix_draft.models.metrix import BagTagEntry, Competition, CompetitionResult
from metrix_draft.models.participant import Participant, RatingAnchors
from metrix_draft.models.wheel import Segment, SpinTrajectory

__all__ = [
    # Draft
    "CreateDraftRequest",
    "DraftState",
    "DraftView",
    "ParticipantOverride",
    "SpinResult",
    "WinnerEntry",
    # Metrix
    "BagTagEntry",
    "Competition",
    "CompetitionResult",
    # Participant
    "Participant",
    "RatingAnchors",
    # Wheel
    "Segment",
    "SpinTrajectory",
]
