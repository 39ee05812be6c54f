"""
Rating Service

Converts a round score into a rating using the course's two rating
anchors, and keeps each participant's tickets in step with their ratings.
"""

import logging
from collections.abc import Iterable

from metrix_draft.errors import InvalidAnchorsError
from metrix_draft.models.participant import Participant, RatingAnchors
from metrix_draft.services.tickets import weigh
from metrix_draft.utils.rounding import round_half_away_from_zero

logger = logging.getLogger(__name__)


def normalize(raw_score: float, anchors: RatingAnchors) -> int:
    """
    Map a raw round score onto the rating scale.

    Linear interpolation through (result_low, rating_low) and
    (result_high, rating_high). Lower scores are better in disc golf, so
    result_low is usually the larger number and the slope is negative in
    score terms.

    Args:
        raw_score: Round total
        anchors: Course rating anchors

    Returns:
        Rating rounded half away from zero

    Raises:
        InvalidAnchorsError: If the anchors are missing or degenerate
    """
    if not anchors.is_valid:
        raise InvalidAnchorsError(f"Rating anchors unusable: {anchors.model_dump()}")

    rating = (anchors.rating_high - anchors.rating_low) * (
        raw_score - anchors.result_low
    ) / (anchors.result_high - anchors.result_low) + anchors.rating_low
    return round_half_away_from_zero(rating)


class RatingService:
    """
    Applies the normalizer and the ticket weigher to participants.

    Falls back to each participant's baseline rating when the anchors are
    unusable; participants with neither stay unrated and get no tickets.
    """

    def __init__(self, anchors: RatingAnchors | None = None):
        self.anchors = anchors or RatingAnchors()
        if not self.anchors.is_valid:
            logger.debug("Anchors invalid, falling back to baseline ratings")

    @property
    def anchors_valid(self) -> bool:
        return self.anchors.is_valid

    def derive_rating(self, participant: Participant) -> int | None:
        """Rating for this round, or the baseline when anchors are unusable."""
        try:
            return normalize(participant.raw_score, self.anchors)
        except InvalidAnchorsError:
            if participant.has_baseline:
                return round_half_away_from_zero(participant.baseline_rating)
            return None

    def rate(self, participant: Participant) -> Participant:
        """Recompute derived rating and tickets for a single participant."""
        participant.derived_rating = self.derive_rating(participant)

        if participant.derived_rating is None:
            participant.weight = None
            logger.info("%s has no rating available, excluded from the wheel", participant.name)
        else:
            participant.weight = weigh(
                participant.derived_rating,
                participant.baseline_rating if participant.has_baseline else None,
            )
        return participant

    def rate_all(self, participants: Iterable[Participant]) -> list[Participant]:
        return [self.rate(p) for p in participants]

    def set_baseline_rating(
        self, participant: Participant, rating: float | None
    ) -> Participant:
        """Apply a manual rating correction and re-weigh only this participant."""
        participant.baseline_rating = rating if rating else None
        return self.rate(participant)
