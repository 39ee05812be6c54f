"""Business logic services."""

from metrix_draft.services.animation import SpinAnimator, ease_out_quart, plan_spin, rotation_at
from metrix_draft.services.draft import DraftSession
from metrix_draft.services.ratings import RatingService, normalize
from metrix_draft.services.tickets import weigh
from metrix_draft.services.wheel import partition, resolve_winner

__all__ = [
    # Ratings
    "RatingService",
    "normalize",
    "weigh",
    # Wheel
    "partition",
    "resolve_winner",
    # Animation
    "SpinAnimator",
    "ease_out_quart",
    "plan_spin",
    "rotation_at",
    # Draft
    "DraftSession",
]
