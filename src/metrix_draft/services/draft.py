"""
Draft Session

State machine for a draft: spin the wheel, remove the winner, rebuild
the wheel from whoever is left, and repeat until the pool is empty.
"""

import logging
import random
from collections.abc import Iterable

from metrix_draft.config import Settings, get_settings
from metrix_draft.errors import (
    DraftStateError,
    EmptyPoolError,
    EmptyPopulationError,
    ParticipantNotFoundError,
)
from metrix_draft.models.draft import DraftState, SpinResult, WinnerEntry
from metrix_draft.models.participant import Participant
from metrix_draft.models.wheel import Segment, SpinTrajectory
from metrix_draft.services.animation import plan_spin
from metrix_draft.services.ratings import RatingService
from metrix_draft.services.wheel import partition, resolve_winner

logger = logging.getLogger(__name__)


class DraftSession:
    """
    One draft over a fixed roster.

    The pool holds the rated, active roster members not yet drawn, in
    roster order. Roster members outside both pool and winners are on the
    bench (deselected or unrated). Spins never touch the bench, so pool and
    winners together are unchanged by every spin.

    State only changes through request_spin(), complete_spin() and the two
    override methods.

    Usage:
        session = DraftSession(participants, RatingService(anchors))
        while session.pool:
            session.spin(rng)
        print([w.label for w in session.winner_entries()])
    """

    def __init__(
        self,
        participants: Iterable[Participant],
        ratings: RatingService | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.ratings = ratings or RatingService()
        self.roster: list[Participant] = list(participants)

        ids = [p.id for p in self.roster]
        if len(set(ids)) != len(ids):
            raise ValueError("Participant ids must be unique within a draft")

        self._by_id: dict[str, Participant] = {p.id: p for p in self.roster}
        self.pool: list[Participant] = [p for p in self.roster if self._eligible(p)]
        self.winners: list[Participant] = []
        self.rotation: float = 0.0
        self.state = DraftState.IDLE
        self.segments: list[Segment] = []
        self._trajectory: SpinTrajectory | None = None
        self._rebuild_segments()

    @staticmethod
    def _eligible(participant: Participant) -> bool:
        return participant.active and participant.is_rated

    def _rebuild_segments(self) -> None:
        self.segments = partition(self.pool) if self.pool else []

    def get_participant(self, participant_id: str) -> Participant:
        try:
            return self._by_id[participant_id]
        except KeyError:
            raise ParticipantNotFoundError(participant_id) from None

    @property
    def bench(self) -> list[Participant]:
        drawn = {p.id for p in self.pool} | {p.id for p in self.winners}
        return [p for p in self.roster if p.id not in drawn]

    @property
    def total_tickets(self) -> int:
        return sum(p.weight for p in self.pool)

    @property
    def trajectory(self) -> SpinTrajectory | None:
        """The spin in flight, if any."""
        return self._trajectory

    # ==================== Spin Transitions ====================

    def request_spin(self, rng: random.Random) -> SpinTrajectory | None:
        """
        Start a spin.

        Returns:
            The planned trajectory, or None if a spin is already in flight

        Raises:
            EmptyPoolError: If nobody is left to draw
        """
        if self.state == DraftState.SPINNING:
            return None
        if self.state == DraftState.COMPLETE or not self.pool:
            raise EmptyPoolError("No participants left in the draw pool")
        if not self.segments:
            raise EmptyPopulationError("Wheel has no segments")

        self._trajectory = plan_spin(
            self.rotation,
            rng,
            base_turns=self.settings.base_turns,
            duration_ms=self.settings.spin_duration_ms,
        )
        self.state = DraftState.SPINNING
        return self._trajectory

    def complete_spin(self) -> SpinResult:
        """
        Finish the spin in flight: pick the winner from the terminal rotation,
        move them from pool to winners and rebuild the wheel.

        Raises:
            DraftStateError: If no spin is in flight
        """
        if self.state != DraftState.SPINNING or self._trajectory is None:
            raise DraftStateError(f"No spin in flight (state: {self.state.value})")

        trajectory = self._trajectory
        winner = resolve_winner(self.segments, trajectory.terminal_rotation)

        self.rotation = trajectory.terminal_rotation
        self.pool = [p for p in self.pool if p.id != winner.id]
        self.winners.append(winner)
        self._trajectory = None

        if self.pool:
            self._rebuild_segments()
            self.state = DraftState.IDLE
        else:
            self.segments = []
            self.state = DraftState.COMPLETE

        logger.info(
            "Pick %d: %s (%d tickets), %d left",
            len(self.winners),
            winner.name,
            winner.weight,
            len(self.pool),
        )
        return SpinResult(
            spin_number=len(self.winners),
            winner=winner,
            tickets=winner.weight,
            trajectory=trajectory,
            remaining=len(self.pool),
            complete=self.state == DraftState.COMPLETE,
        )

    def spin(self, rng: random.Random) -> SpinResult | None:
        """Request and complete a spin in one step, skipping the animation."""
        if self.request_spin(rng) is None:
            return None
        return self.complete_spin()

    # ==================== Manual Overrides ====================

    def _require_editable(self) -> None:
        if self.state == DraftState.SPINNING:
            raise DraftStateError("Cannot edit participants while the wheel is spinning")
        if self.state == DraftState.COMPLETE:
            raise DraftStateError("Draft is complete")

    def _sync_pool_membership(self, participant: Participant) -> None:
        if any(w.id == participant.id for w in self.winners):
            return

        in_pool = any(p.id == participant.id for p in self.pool)
        if self._eligible(participant) and not in_pool:
            pool_ids = {p.id for p in self.pool} | {participant.id}
            self.pool = [p for p in self.roster if p.id in pool_ids]
        elif not self._eligible(participant) and in_pool:
            self.pool = [p for p in self.pool if p.id != participant.id]

        self._rebuild_segments()

    def set_baseline_rating(self, participant_id: str, rating: float | None) -> Participant:
        """Correct a participant's prior rating and re-weigh them."""
        self._require_editable()
        participant = self.get_participant(participant_id)
        self.ratings.set_baseline_rating(participant, rating)
        self._sync_pool_membership(participant)
        return participant

    def set_active(self, participant_id: str, active: bool) -> Participant:
        """Include or exclude a participant from the remaining draws."""
        self._require_editable()
        participant = self.get_participant(participant_id)
        participant.active = active
        self._sync_pool_membership(participant)
        return participant

    # ==================== Reporting ====================

    def winner_entries(self) -> list[WinnerEntry]:
        return [
            WinnerEntry(
                pick_number=i,
                participant_id=p.id,
                name=p.name,
                tickets=p.weight,
            )
            for i, p in enumerate(self.winners, start=1)
        ]

    def restart(self) -> "DraftSession":
        """A fresh session over the same roster, ratings and settings."""
        if self.state == DraftState.SPINNING:
            raise DraftStateError("Cannot restart while the wheel is spinning")
        return DraftSession(self.roster, ratings=self.ratings, settings=self.settings)
