"""
Wheel Service

Partitions weighted participants into arcs of a full turn and resolves
which arc sits under the pointer once the wheel stops.

Angles follow the canvas convention the wheel is drawn in: radians,
0 at three o'clock, increasing clockwise. The pointer is fixed at the top
of the wheel (3π/2) and the wheel itself rotates.
"""

import logging
import math
from collections.abc import Sequence

from metrix_draft.errors import EmptyPopulationError, NoSegmentMatchedError
from metrix_draft.models.participant import Participant
from metrix_draft.models.wheel import Segment

logger = logging.getLogger(__name__)

TAU = 2 * math.pi
POINTER_ANGLE = 1.5 * math.pi


def partition(population: Sequence[Participant]) -> list[Segment]:
    """
    Split a full turn between participants in proportion to their tickets.

    Participants keep the order they are given in. Boundaries are computed
    from cumulative ticket counts, so adjacent segments share the exact same
    float and the last segment ends at exactly 2π.

    Args:
        population: Active participants, each with a positive weight

    Returns:
        Contiguous segments covering [0, 2π)

    Raises:
        EmptyPopulationError: If the population is empty
        ValueError: If a participant has no positive weight
    """
    if not population:
        raise EmptyPopulationError("Cannot build a wheel with no active participants")

    for participant in population:
        if not participant.weight or participant.weight < 1:
            raise ValueError(
                f"Participant {participant.name} has no tickets (weight={participant.weight})"
            )

    total = sum(p.weight for p in population)
    segments: list[Segment] = []
    cumulative = 0
    start = 0.0

    for participant in population:
        cumulative += participant.weight
        end = TAU * (cumulative / total)
        segments.append(
            Segment(participant=participant, start_angle=start, end_angle=end)
        )
        start = end

    return segments


def effective_angle(rotation: float) -> float:
    """Angle in the wheel's own frame that sits under the pointer."""
    return (POINTER_ANGLE - rotation) % TAU


def find_segment(segments: Sequence[Segment], rotation: float) -> Segment:
    """
    Find the segment under the pointer.

    Raises:
        NoSegmentMatchedError: If no half-open segment contains the angle
    """
    angle = effective_angle(rotation)
    for segment in segments:
        if segment.contains(angle):
            return segment

    raise NoSegmentMatchedError(
        f"No segment contains angle {angle!r} (rotation {rotation!r})",
        effective_angle=angle,
    )


def resolve_winner(
    segments: Sequence[Segment], terminal_rotation: float, strict: bool = False
) -> Participant:
    """
    Participant whose segment stops under the pointer.

    A rotation landing exactly on a boundary belongs to the segment that
    starts there. An angle no segment claims can only come from float
    drift; it is clamped to the last segment unless strict is set.

    Args:
        segments: Wheel segments from partition()
        terminal_rotation: Final accumulated rotation of the spin
        strict: Raise instead of clamping

    Returns:
        The winning participant
    """
    if not segments:
        raise EmptyPopulationError("Cannot resolve a winner on an empty wheel")

    try:
        return find_segment(segments, terminal_rotation).participant
    except NoSegmentMatchedError as e:
        if strict:
            raise
        logger.warning(
            "%s; clamping to last segment (%s)", e.message, segments[-1].participant.name
        )
        return segments[-1].participant
