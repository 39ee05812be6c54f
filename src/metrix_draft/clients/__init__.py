"""External API clients."""

from metrix_draft.clients.metrix import DraftContext, MetrixAPIError, MetrixClient

__all__ = ["MetrixClient", "MetrixAPIError", "DraftContext"]
