"""
Participant and rating anchor models.
"""

import math

from pydantic import BaseModel, Field, field_validator


class RatingAnchors(BaseModel):
    """
    Two calibration points mapping a round score to a rating.

    Metrix publishes them per course as RatingValue1/RatingResult1 and
    RatingValue2/RatingResult2.
    """

    rating_low: float | None = Field(default=None, description="RatingValue1")
    result_low: float | None = Field(default=None, description="RatingResult1")
    rating_high: float | None = Field(default=None, description="RatingValue2")
    result_high: float | None = Field(default=None, description="RatingResult2")

    @field_validator("*", mode="before")
    @classmethod
    def _non_numeric_is_missing(cls, value):
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @property
    def is_valid(self) -> bool:
        """
        True when all four values are usable.

        Zero counts as missing: Metrix reports unset course parameters as 0.
        """
        values = (self.rating_low, self.result_low, self.rating_high, self.result_high)
        if any(v is None or not math.isfinite(v) or v == 0 for v in values):
            return False
        return self.result_high != self.result_low


class Participant(BaseModel):
    """A competition player taking part in the draft."""

    id: str
    name: str
    raw_score: float = Field(description="Round total from the competition")
    baseline_rating: float | None = Field(
        default=None, description="Prior rating; None or 0 means unknown"
    )
    derived_rating: int | None = Field(
        default=None, description="Rating earned in this round"
    )
    weight: int | None = Field(default=None, description="Tickets on the wheel")
    active: bool = Field(default=True, description="Included in the draw pool")
    color: str | None = None

    @property
    def has_baseline(self) -> bool:
        return bool(self.baseline_rating)

    @property
    def is_rated(self) -> bool:
        """Whether the participant has a rating and can be weighted."""
        return self.derived_rating is not None and self.weight is not None
