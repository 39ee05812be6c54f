"""
Draft engine exceptions.

Every error here leaves the draft session usable: some are recovered
locally by the engine, the rest refuse the requested action.
"""


class DraftError(Exception):
    """Base class for draft engine errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidAnchorsError(DraftError):
    """Rating anchors are missing, non-numeric or degenerate."""


class EmptyPopulationError(DraftError):
    """A wheel cannot be built from zero active participants."""


class EmptyPoolError(DraftError):
    """A spin was requested but nobody is left in the draw pool."""


class NoSegmentMatchedError(DraftError):
    """No segment contains the pointer angle (floating-point drift)."""

    def __init__(self, message: str, effective_angle: float):
        self.effective_angle = effective_angle
        super().__init__(message)


class DraftStateError(DraftError):
    """The action is not allowed in the session's current state."""


class ParticipantNotFoundError(DraftError):
    """No participant with the given id is part of the session."""

    def __init__(self, participant_id: str):
        self.participant_id = participant_id
        super().__init__(f"Participant not found: {participant_id}")
