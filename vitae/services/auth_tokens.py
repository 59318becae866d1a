import hmac
import logging
import secrets
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from ..core.errors import AuthError


logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TTL_SECONDS = 6 * 60 * 60


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: float

    def expires_at_iso(self) -> str:
        return (
            datetime.fromtimestamp(self.expires_at, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )


def safe_equal(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8", "surrogatepass"), b.encode("utf-8", "surrogatepass"))


class TokenStore:
    """In-memory admin tokens with a fixed lifetime.

    Tokens cannot be refreshed; once expired they are dropped on the next
    verification and the admin must authenticate again.
    """

    def __init__(
        self,
        secret: Optional[str],
        ttl_seconds: float = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._secret = (secret or "").strip()
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._tokens: Dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def authenticate(self, passkey: str) -> IssuedToken:
        if not self.enabled:
            raise AuthError("Admin key not configured")
        if not isinstance(passkey, str) or not passkey:
            raise AuthError("Missing passkey")
        if not safe_equal(passkey, self._secret):
            raise AuthError("Invalid passkey")
        return self.issue()

    def issue(self) -> IssuedToken:
        token = secrets.token_hex(32)
        expires_at = self._clock() + self._ttl_seconds
        with self._lock:
            self._tokens[token] = expires_at
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: Optional[str]) -> bool:
        with self._lock:
            self._prune_unlocked()
            if not token:
                return False
            expires_at = self._tokens.get(token)
            return expires_at is not None and expires_at > self._clock()

    def require(self, token: Optional[str]) -> None:
        if not self.verify(token):
            raise AuthError()

    def revoke(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            return self._tokens.pop(token, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def _prune_unlocked(self) -> None:
        now = self._clock()
        expired = [token for token, expires_at in self._tokens.items() if expires_at <= now]
        for token in expired:
            del self._tokens[token]
        if expired:
            logger.info(f"Pruned {len(expired)} expired admin token(s)")
