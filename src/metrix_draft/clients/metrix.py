"""
Async Disc Golf Metrix API Client

Fetches competition results, course rating parameters and bag-tag
ratings from Disc Golf Metrix. Uses httpx for async HTTP requests with
connection pooling.

API: https://discgolfmetrix.com/api.php?content=<endpoint>&id=<id>
"""

import asyncio
import logging
import random
from typing import Any

import httpx
from pydantic import ValidationError

from metrix_draft.config import Settings, get_settings
from metrix_draft.models import (
    BagTagEntry,
    Competition,
    CompetitionResult,
    Participant,
    RatingAnchors,
)
from metrix_draft.services.draft import DraftSession
from metrix_draft.services.ratings import RatingService
from metrix_draft.visualization.charts import random_color

logger = logging.getLogger(__name__)

ANCHOR_KEYS = {
    "rating_low": "RatingValue1",
    "result_low": "RatingResult1",
    "rating_high": "RatingValue2",
    "result_high": "RatingResult2",
}


class MetrixAPIError(Exception):
    """Exception raised for Disc Golf Metrix API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def _has_anchor_params(obj: Any) -> bool:
    return (
        isinstance(obj, dict)
        and bool(obj.get("RatingValue1"))
        and bool(obj.get("RatingResult1"))
    )


def extract_anchors(payload: Any) -> RatingAnchors:
    """
    Find the rating parameters in a course payload.

    They sit on the course object itself, under a "course" wrapper, or on
    the first track. Anything else yields empty (invalid) anchors.
    """
    source = payload.get("course", payload) if isinstance(payload, dict) else None
    if not isinstance(source, dict):
        return RatingAnchors()

    if _has_anchor_params(source):
        params = source
    else:
        tracks = source.get("Tracks") or []
        if tracks and _has_anchor_params(tracks[0]):
            params = tracks[0]
        else:
            logger.warning("Rating parameters not found in course data")
            return RatingAnchors()

    return RatingAnchors(**{field: params.get(key) for field, key in ANCHOR_KEYS.items()})


def participant_ids(results: list[CompetitionResult]) -> list[str]:
    """
    One unique id per result line.

    Guests have no Metrix user id, and a player can appear twice in team
    formats; those lines get "guest-<position>" instead.
    """
    ids: list[str] = []
    taken = {r.user_id for r in results if r.user_id is not None}
    seen: set[str] = set()
    for index, result in enumerate(results, start=1):
        participant_id = result.user_id
        if participant_id is None or participant_id in seen:
            participant_id = f"guest-{index}"
            while participant_id in taken or participant_id in seen:
                participant_id = f"{participant_id}-{index}"
            logger.info("%s has no unique Metrix id, using %s", result.name, participant_id)
        seen.add(participant_id)
        ids.append(participant_id)
    return ids


class MetrixClient:
    """
    Async client for the Disc Golf Metrix API.

    Usage:
        async with MetrixClient() as client:
            competition = await client.get_competition("2912345")
            anchors = await client.get_course_anchors(competition.course_id)
    """

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "MetrixClient":
        """Create HTTP client on context entry."""
        self._client = httpx.AsyncClient(
            base_url=self.settings.metrix_base_url,
            timeout=httpx.Timeout(self.settings.metrix_timeout),
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close HTTP client on context exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the HTTP client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError(
                "MetrixClient must be used as async context manager: "
                "async with MetrixClient() as client: ..."
            )
        return self._client

    async def _get(self, params: dict[str, Any]) -> Any:
        """Make a GET request to the Metrix API."""
        response = await self.client.get("/api.php", params=params)

        if response.status_code == 404:
            return None

        if response.status_code != 200:
            raise MetrixAPIError(
                f"API request failed: {params.get('content')}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise MetrixAPIError(
                f"Invalid JSON from Metrix: {params.get('content')}",
                status_code=response.status_code,
            ) from None

    # ==================== Competition Endpoints ====================

    async def get_competition(self, competition_id: str) -> Competition | None:
        """
        Get a competition with its results.

        Args:
            competition_id: Metrix competition (game) ID

        Returns:
            Competition object or None if not found
        """
        data = await self._get({"content": "result", "id": competition_id})
        if not data or not data.get("Competition"):
            return None
        try:
            return Competition(**data["Competition"])
        except ValidationError as e:
            raise MetrixAPIError(
                f"Malformed competition data: {competition_id} ({e.error_count()} errors)",
                status_code=200,
            ) from e

    # ==================== Course Endpoints ====================

    async def get_course_anchors(self, course_id: str | None) -> RatingAnchors:
        """
        Get the rating parameters of a course.

        Args:
            course_id: Metrix course ID

        Returns:
            RatingAnchors, invalid if the course or its parameters are missing
        """
        if not course_id:
            return RatingAnchors()

        data = await self._get({"content": "course", "code": "XXX", "id": course_id})
        if data is None:
            return RatingAnchors()
        return extract_anchors(data)

    # ==================== Rating Endpoints ====================

    async def get_bagtag_ratings(self, list_id: int | None = None) -> dict[str, float]:
        """
        Get player ratings from a bag-tag list.

        Args:
            list_id: Bag-tag list ID (default from settings)

        Returns:
            Dict mapping exact player name to rating
        """
        list_id = list_id if list_id is not None else self.settings.bagtag_list_id
        data = await self._get({"content": "bagtag_list", "id": list_id})
        if not data:
            return {}

        ratings: dict[str, float] = {}
        for raw in data.get("players") or []:
            try:
                entry = BagTagEntry(**raw)
            except (TypeError, ValueError):
                continue
            if entry.rating:
                ratings[entry.name] = entry.rating
        return ratings


class DraftContext:
    """
    Everything needed to start a draft for one competition.

    Holds the competition, the course anchors and the rated participants,
    and builds draft sessions from them.
    """

    def __init__(
        self,
        competition: Competition,
        anchors: RatingAnchors,
        participants: list[Participant],
        ratings: RatingService,
    ):
        self.competition = competition
        self.anchors = anchors
        self.participants = participants
        self.ratings = ratings

    @classmethod
    async def create(
        cls,
        client: MetrixClient,
        competition_id: str,
        course_id: str | None = None,
        rng: random.Random | None = None,
    ) -> "DraftContext":
        """
        Factory method to create a DraftContext by fetching all required data.

        Args:
            client: MetrixClient instance
            competition_id: Metrix competition ID
            course_id: Course to take anchors from (default: the competition's)
            rng: Random source for wheel colours

        Returns:
            Initialized DraftContext
        """
        competition = await client.get_competition(competition_id)
        if competition is None:
            raise MetrixAPIError(f"Competition not found: {competition_id}")

        course_id = course_id or competition.course_id
        if not course_id:
            logger.warning("Competition %s has no course, using baseline ratings", competition_id)

        anchors, baselines = await asyncio.gather(
            client.get_course_anchors(course_id),
            client.get_bagtag_ratings(),
        )

        rng = rng or random.Random()
        results = competition.finished_results
        participants = [
            Participant(
                id=participant_id,
                name=result.name,
                raw_score=result.score,
                baseline_rating=baselines.get(result.name),
                color=random_color(rng),
            )
            for participant_id, result in zip(participant_ids(results), results)
        ]

        ratings = RatingService(anchors)
        ratings.rate_all(participants)
        return cls(competition, anchors, participants, ratings)

    @property
    def name(self) -> str | None:
        return self.competition.name

    def new_session(self, settings: Settings | None = None) -> DraftSession:
        """Start a draft over the currently selected participants."""
        return DraftSession(self.participants, ratings=self.ratings, settings=settings)
