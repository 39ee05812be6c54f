"""Rounding helpers for ratings and tickets."""

import math


def round_half_away_from_zero(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    The builtin round() rounds ties to even (round(37.5) == 38 but
    round(36.5) == 36), which would make results depend on parity.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))
