"""
Draft session models and API schemas.
"""

from enum import Enum

from pydantic import BaseModel, Field

from metrix_draft.models.participant import Participant
from metrix_draft.models.wheel import SpinTrajectory


class DraftState(str, Enum):
    """Lifecycle state of a draft session."""

    IDLE = "idle"
    SPINNING = "spinning"
    COMPLETE = "complete"


class WinnerEntry(BaseModel):
    """A drawn participant and the position they were drawn at."""

    pick_number: int
    participant_id: str
    name: str
    tickets: int

    @property
    def label(self) -> str:
        return f"{self.pick_number}. {self.name} (Tickets: {self.tickets})"


class SpinResult(BaseModel):
    """Outcome of one completed spin."""

    spin_number: int
    winner: Participant
    tickets: int
    trajectory: SpinTrajectory
    remaining: int = Field(description="Participants left in the pool")
    complete: bool = Field(description="True when the pool is exhausted")


class DraftView(BaseModel):
    """Snapshot of a draft session for API responses."""

    draft_id: str
    competition_name: str | None = None
    state: DraftState
    rotation: float
    anchors_valid: bool
    participants: list[Participant]
    pool: list[str] = Field(description="Participant ids still in the pool, in draw order")
    winners: list[WinnerEntry]
    total_tickets: int


class CreateDraftRequest(BaseModel):
    """Request body for creating a draft from a Metrix competition."""

    game_id: str
    course_id: str | None = Field(
        default=None, description="Overrides the competition's own course"
    )
    seed: int | None = Field(default=None, description="Seed for reproducible draws")


class ParticipantOverride(BaseModel):
    """Manual correction of a participant's rating or selection."""

    baseline_rating: float | None = None
    active: bool | None = None
