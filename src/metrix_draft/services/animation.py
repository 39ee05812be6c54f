"""
Spin Animation

Plans spin trajectories and drives the frame clock that feeds a
rendering sink. Every frame is computed from elapsed time alone, so
dropped frames never change where the wheel ends up.
"""

import asyncio
import logging
import random
import time
from typing import Protocol, Sequence

from metrix_draft.config import Settings, get_settings
from metrix_draft.models.participant import Participant
from metrix_draft.models.wheel import Segment, SpinTrajectory
from metrix_draft.services.wheel import TAU

logger = logging.getLogger(__name__)


class RenderSink(Protocol):
    """Anything that can display the wheel. The engine never reads from it."""

    def render_frame(self, segments: Sequence[Segment], rotation: float) -> None: ...

    def render_winner(self, winner: Participant) -> None: ...


def ease_out_quart(t: float) -> float:
    """Ease-out quartic: fast start, long slow-down. t is clamped to [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    return 1 - (1 - t) ** 4


def plan_spin(
    current_rotation: float,
    rng: random.Random,
    base_turns: int = 5,
    duration_ms: float = 5000.0,
) -> SpinTrajectory:
    """
    Pick where the next spin stops.

    The wheel always turns at least base_turns full turns, plus a uniform
    random offset in [0, 2π) drawn from rng.
    """
    offset = rng.random() * TAU
    return SpinTrajectory(
        start_rotation=current_rotation,
        terminal_rotation=current_rotation + base_turns * TAU + offset,
        duration_ms=duration_ms,
    )


def rotation_at(trajectory: SpinTrajectory, elapsed_ms: float) -> float:
    """Displayed rotation after elapsed_ms of the spin."""
    if trajectory.duration_ms <= 0 or elapsed_ms >= trajectory.duration_ms:
        return trajectory.terminal_rotation
    eased = ease_out_quart(elapsed_ms / trajectory.duration_ms)
    return trajectory.start_rotation + trajectory.delta * eased


class SpinAnimator:
    """
    Runs one spin of a draft session in real time.

    Usage:
        animator = SpinAnimator()
        result = await animator.run(session, rng, sink)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clock=time.monotonic,
        sleep=asyncio.sleep,
    ):
        self.settings = settings or get_settings()
        self._clock = clock
        self._sleep = sleep

    async def run(self, session, rng: random.Random, sink: RenderSink | None = None):
        """
        Spin the wheel to completion.

        Args:
            session: DraftSession to spin
            rng: Random source for the spin offset
            sink: Optional rendering sink fed every frame

        Returns:
            SpinResult, or None if a spin was already in flight
        """
        trajectory = session.request_spin(rng)
        if trajectory is None:
            return None

        segments = list(session.segments)
        interval = self.settings.frame_interval_ms / 1000
        started = self._clock()
        frames = 0

        while True:
            elapsed_ms = (self._clock() - started) * 1000
            if elapsed_ms >= trajectory.duration_ms:
                break
            if sink is not None:
                sink.render_frame(segments, rotation_at(trajectory, elapsed_ms))
            frames += 1
            await self._sleep(interval)

        if sink is not None:
            sink.render_frame(segments, trajectory.terminal_rotation)

        result = session.complete_spin()
        logger.debug("Spin %d finished after %d frames", result.spin_number, frames)

        if sink is not None:
            sink.render_winner(result.winner)
        return result

    async def run_all(self, session, rng: random.Random, sink: RenderSink | None = None):
        """Spin until the pool is exhausted, pausing between winners."""
        results = []
        while session.pool:
            results.append(await self.run(session, rng, sink))
            if session.pool:
                await self._sleep(self.settings.winner_pause_ms / 1000)
        return results
