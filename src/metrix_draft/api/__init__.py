"""API package - FastAPI routes and dependencies."""

from metrix_draft.api.dependencies import (
    ClientManager,
    DraftRecord,
    DraftRecordDep,
    DraftStore,
    MetrixClientDep,
    SettingsDep,
    get_draft_record,
    get_metrix_client,
)

__all__ = [
    "ClientManager",
    "DraftRecord",
    "DraftStore",
    "get_metrix_client",
    "get_draft_record",
    "MetrixClientDep",
    "DraftRecordDep",
    "SettingsDep",
]
