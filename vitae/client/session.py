import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import ClientConfig
from ..core.validation import validate_bundle
from .api import AdminToken, ContentApiClient, SaveStatus
from .cache import LocalCache
from .hydration import HydrationResult, hydrate, mirror_to_cache


logger = logging.getLogger(__name__)


@dataclass
class CommitOutcome:
    status: SaveStatus
    errors: List[str] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is SaveStatus.SAVED


class ContentSession:
    """Live content plus the admin's working copy.

    The live bundle only changes through ``hydrate`` (once, at startup) and a
    successful ``commit``. Edits go to a separate deep copy, and are refused
    until hydration has finished so a late server response can never
    overwrite them.
    """

    def __init__(self, api: ContentApiClient, cache: LocalCache, defaults: Optional[Dict[str, Any]] = None) -> None:
        self._api = api
        self._cache = cache
        self._defaults = defaults
        self._live: Optional[Dict[str, Any]] = None
        self._draft: Optional[Dict[str, Any]] = None
        self._token: Optional[AdminToken] = None
        self.last_hydration: Optional[HydrationResult] = None

    @classmethod
    def from_config(cls, config: Optional[ClientConfig] = None, *, http: Optional[httpx.Client] = None) -> "ContentSession":
        """Build a session from ClientConfig: API at CONTENT_API_BASE_URL, cache in CONTENT_CACHE_DIR."""
        config = config or ClientConfig()
        api = ContentApiClient(config.CONTENT_API_BASE_URL, timeout=config.CONTENT_API_TIMEOUT, http=http)
        return cls(api, LocalCache(config.CONTENT_CACHE_DIR))

    @property
    def cache(self) -> LocalCache:
        return self._cache

    # Startup

    def hydrate(self) -> HydrationResult:
        if self._live is not None:
            raise RuntimeError("Content session is already hydrated")
        remote = self._api.fetch_bundle()
        result = hydrate(remote, self._cache, self._defaults)
        self._live = result.bundle
        self.last_hydration = result
        return result

    @property
    def hydrated(self) -> bool:
        return self._live is not None

    @property
    def live(self) -> Dict[str, Any]:
        if self._live is None:
            raise RuntimeError("Content session has not been hydrated")
        return copy.deepcopy(self._live)

    # Authentication

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    def login(self, passkey: str) -> AdminToken:
        """Exchange the passkey for a token; AuthError on rejection."""
        self._token = None
        self._token = self._api.authenticate(passkey)
        return self._token

    def check_token(self) -> bool:
        """Ask the server whether the held token is still valid, dropping it if not."""
        if self._token is None:
            return False
        if not self._api.verify(self._token.token):
            logger.info("Admin token no longer valid; re-authentication required")
            self._token = None
        return self._token is not None

    def logout(self) -> None:
        token, self._token = self._token, None
        if token is not None:
            self._api.logout(token.token)

    # Editing

    def begin_edit(self) -> Dict[str, Any]:
        """Return the working copy, creating it from the live bundle if needed."""
        if self._live is None:
            raise RuntimeError("Cannot edit before content is hydrated")
        if self._draft is None:
            self._draft = copy.deepcopy(self._live)
        return self._draft

    @property
    def draft(self) -> Optional[Dict[str, Any]]:
        return self._draft

    def discard_edits(self) -> None:
        self._draft = None

    def commit(self) -> CommitOutcome:
        """Validate, publish and cache the working copy.

        The live bundle and cache change only when the server accepted the
        save.
        """
        draft = self.begin_edit()

        validation = validate_bundle(draft)
        if not validation.ok:
            logger.warning(f"Commit rejected locally: {validation.errors}")
            return CommitOutcome(SaveStatus.INVALID, errors=validation.errors, message="Save rejected: payload invalid")

        if self._token is None:
            return CommitOutcome(SaveStatus.UNAUTHORIZED, message="Access denied")

        response = self._api.save(draft, self._token.token)

        if response.status is SaveStatus.UNAUTHORIZED:
            self._token = None
            return CommitOutcome(SaveStatus.UNAUTHORIZED, message="Access denied")
        if response.status is SaveStatus.INVALID:
            return CommitOutcome(SaveStatus.INVALID, errors=response.errors, message="Save rejected: payload invalid")
        if response.status is SaveStatus.FAILED:
            logger.error(f"Commit failed on the server: {response.message}")
            return CommitOutcome(SaveStatus.FAILED, message=f"Save failed: {response.message or 'server error'}")

        self._live = copy.deepcopy(draft)
        try:
            mirror_to_cache(self._live, self._cache)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Saved remotely but failed to update local cache: {e}")
        return CommitOutcome(SaveStatus.SAVED)
