"""Client side of the content store: cache, API client, startup cascade and commits."""

from .api import AdminToken, ContentApiClient, SaveResponse, SaveStatus
from .cache import CACHE_KEYS, LocalCache
from .hydration import HydrationResult, Source, hydrate, resolve_field
from .session import CommitOutcome, ContentSession

__all__ = [
    "AdminToken",
    "CACHE_KEYS",
    "CommitOutcome",
    "ContentApiClient",
    "ContentSession",
    "HydrationResult",
    "LocalCache",
    "SaveResponse",
    "SaveStatus",
    "Source",
    "hydrate",
    "resolve_field",
]
