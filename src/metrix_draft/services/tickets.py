"""
Ticket weighting.

A participant starts from 50 tickets. Beating their prior rating ramps
them towards 100 (reached at +100); falling short ramps them down towards
25 (reached at -100). The reward slope is twice the penalty slope.
"""

from metrix_draft.utils.rounding import round_half_away_from_zero

BASE_TICKETS = 50
MAX_TICKETS = 100
MIN_TICKETS = 25
SATURATION_DIFF = 100
REWARD_SLOPE = 0.5
PENALTY_SLOPE = 0.25


def weigh(derived_rating: float, baseline_rating: float | None) -> int:
    """
    Tickets for a participant.

    Args:
        derived_rating: Rating earned this round
        baseline_rating: Prior rating, None when unknown (treated as no change)

    Returns:
        Ticket count in [25, 100]
    """
    reference = baseline_rating if baseline_rating else derived_rating
    diff = derived_rating - reference

    if diff >= SATURATION_DIFF:
        tickets = MAX_TICKETS
    elif diff <= -SATURATION_DIFF:
        tickets = MIN_TICKETS
    elif diff > 0:
        tickets = round_half_away_from_zero(BASE_TICKETS + diff * REWARD_SLOPE)
    else:
        tickets = round_half_away_from_zero(BASE_TICKETS + diff * PENALTY_SLOPE)

    return max(tickets, 1)
