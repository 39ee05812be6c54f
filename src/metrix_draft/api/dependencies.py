"""
API Dependencies

Shared dependencies for FastAPI route handlers including
client management and the in-memory draft store.
"""

import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Annotated

from fastapi import Depends, HTTPException, Path

from metrix_draft.clients.metrix import DraftContext, MetrixClient
from metrix_draft.config import Settings, get_settings
from metrix_draft.services.draft import DraftSession

logger = logging.getLogger(__name__)


class ClientManager:
    """
    Manages MetrixClient lifecycle for the application.

    Creates a single client instance that can be reused across requests.
    """

    _client: MetrixClient | None = None

    @classmethod
    async def get_client(cls) -> MetrixClient:
        """Get or create the MetrixClient instance."""
        if cls._client is None:
            cls._client = MetrixClient()
            await cls._client.__aenter__()
        return cls._client

    @classmethod
    async def close_client(cls) -> None:
        """Close the MetrixClient instance."""
        if cls._client is not None:
            await cls._client.__aexit__(None, None, None)
            cls._client = None


@dataclass
class DraftRecord:
    """A live draft: where it came from, its session and its random source."""

    draft_id: str
    context: DraftContext
    session: DraftSession
    rng: random.Random = field(default_factory=random.Random)


class DraftStore:
    """
    Process-local store of running drafts.

    Drafts are not persisted; they are lost when the server stops. At most
    max_drafts are kept, the oldest being evicted first.
    """

    _drafts: dict[str, DraftRecord] = {}

    @classmethod
    def add(
        cls,
        context: DraftContext,
        session: DraftSession,
        seed: int | None = None,
        max_drafts: int | None = None,
    ) -> DraftRecord:
        record = DraftRecord(
            draft_id=uuid.uuid4().hex,
            context=context,
            session=session,
            rng=random.Random(seed),
        )
        if max_drafts is not None:
            # dicts keep insertion order, so the first key is the oldest
            while cls._drafts and len(cls._drafts) >= max(max_drafts, 1):
                evicted = next(iter(cls._drafts))
                del cls._drafts[evicted]
                logger.info("Draft store full, evicted draft %s", evicted)
        cls._drafts[record.draft_id] = record
        return record

    @classmethod
    def get(cls, draft_id: str) -> DraftRecord | None:
        return cls._drafts.get(draft_id)

    @classmethod
    def remove(cls, draft_id: str) -> DraftRecord | None:
        return cls._drafts.pop(draft_id, None)

    @classmethod
    def count(cls) -> int:
        return len(cls._drafts)

    @classmethod
    def clear(cls) -> None:
        cls._drafts.clear()


async def get_metrix_client() -> MetrixClient:
    """Dependency to get the MetrixClient."""
    return await ClientManager.get_client()


def get_draft_record(
    draft_id: Annotated[str, Path(description="Draft ID")],
) -> DraftRecord:
    """
    Dependency to look up a running draft.

    Raises HTTPException if the draft does not exist.
    """
    record = DraftStore.get(draft_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Draft not found: {draft_id}")
    return record


# Type aliases for cleaner route signatures
MetrixClientDep = Annotated[MetrixClient, Depends(get_metrix_client)]
DraftRecordDep = Annotated[DraftRecord, Depends(get_draft_record)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
