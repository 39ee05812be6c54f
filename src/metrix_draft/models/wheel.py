"""
Wheel geometry models.
"""

from pydantic import BaseModel, Field

from metrix_draft.models.participant import Participant


class Segment(BaseModel):
    """An arc of the wheel owned by one participant, [start_angle, end_angle)."""

    participant: Participant
    start_angle: float = Field(description="Radians, inclusive")
    end_angle: float = Field(description="Radians, exclusive")

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    def contains(self, angle: float) -> bool:
        return self.start_angle <= angle < self.end_angle


class SpinTrajectory(BaseModel):
    """Start and end of one spin. Only terminal_rotation decides the winner."""

    start_rotation: float
    terminal_rotation: float
    duration_ms: float

    @property
    def delta(self) -> float:
        return self.terminal_rotation - self.start_rotation
