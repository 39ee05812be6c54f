"""API route handlers."""

from metrix_draft.api.routes import drafts

__all__ = [
    "drafts",
]
