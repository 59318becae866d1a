import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import ClientConfig
from ..core.errors import AuthError, RemoteError


logger = logging.getLogger(__name__)


class SaveStatus(str, Enum):
    SAVED = "saved"
    INVALID = "invalid"
    UNAUTHORIZED = "unauthorized"
    FAILED = "failed"


@dataclass
class SaveResponse:
    status: SaveStatus
    errors: List[str] = field(default_factory=list)
    message: str = ""


@dataclass(frozen=True)
class AdminToken:
    token: str
    expires_at: str


class ContentApiClient:
    """Thin synchronous client for the content API.

    Pass ``http`` to reuse an existing ``httpx.Client`` (for example a
    FastAPI ``TestClient``); otherwise one is created from ``base_url``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        http: Optional[httpx.Client] = None,
    ) -> None:
        config = ClientConfig()
        self._timeout = timeout if timeout is not None else config.CONTENT_API_TIMEOUT
        self._owns_http = http is None
        self._http = http or httpx.Client(
            base_url=base_url or config.CONTENT_API_BASE_URL,
            timeout=self._timeout,
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ContentApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, *, token: Optional[str] = None, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            return self._http.request(method, path, headers=headers, timeout=self._timeout, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling {method} {path}: {e}")
            raise RemoteError(f"Timeout calling {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"Connection error calling {method} {path}: {e}")
            raise RemoteError(f"Cannot reach content API at {path}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except (ValueError, RecursionError) as e:
            raise RemoteError(f"Non-JSON response from {response.request.url.path}", response.status_code) from e

    def fetch_bundle(self) -> Optional[Dict[str, Any]]:
        """Return the stored bundle, or None if nothing usable came back.

        Transport failures are logged and reported as None so that startup
        falls through to cached and default content.
        """
        try:
            response = self._request("GET", "/api/data")
            if response.status_code >= 400:
                raise RemoteError(f"GET /api/data returned {response.status_code}", response.status_code)
            data = self._json(response)
        except RemoteError as e:
            logger.warning(f"Failed to load server data: {e}")
            return None
        return data if isinstance(data, dict) else None

    def authenticate(self, passkey: str) -> AdminToken:
        response = self._request("POST", "/api/auth", json={"passkey": passkey})
        if response.status_code in (400, 401, 503):
            try:
                body = response.json()
            except ValueError:
                body = None
            reason = body.get("error") if isinstance(body, dict) else None
            raise AuthError(reason or "Access denied")
        if response.status_code >= 400:
            raise RemoteError(f"POST /api/auth returned {response.status_code}", response.status_code)

        body = self._json(response)
        if not isinstance(body, dict) or not isinstance(body.get("token"), str):
            raise RemoteError("Malformed auth response", response.status_code)
        return AdminToken(token=body["token"], expires_at=str(body.get("expiresAt", "")))

    def verify(self, token: str) -> bool:
        try:
            response = self._request("GET", "/api/auth/verify", token=token)
        except RemoteError:
            return False
        return response.status_code == 200

    def logout(self, token: str) -> None:
        try:
            self._request("POST", "/api/auth/logout", token=token)
        except RemoteError as e:
            logger.warning(f"Logout request failed: {e}")

    def save(self, bundle: Dict[str, Any], token: Optional[str]) -> SaveResponse:
        try:
            response = self._request(
                "POST",
                "/api/save",
                token=token,
                content=json.dumps(bundle).encode("ascii"),
                headers={"Content-Type": "application/json"},
            )
        except (RemoteError, TypeError, ValueError) as e:
            return SaveResponse(SaveStatus.FAILED, message=str(e))

        if response.status_code == 401:
            return SaveResponse(SaveStatus.UNAUTHORIZED, message="Access denied")

        try:
            body = self._json(response)
        except RemoteError as e:
            return SaveResponse(SaveStatus.FAILED, message=str(e))
        if not isinstance(body, dict):
            body = {}

        if response.status_code == 400:
            details = body.get("details")
            errors = [str(d) for d in details] if isinstance(details, list) else []
            return SaveResponse(SaveStatus.INVALID, errors=errors, message=str(body.get("error", "Invalid data")))
        if response.status_code >= 400 or body.get("success") is not True:
            return SaveResponse(SaveStatus.FAILED, message=str(body.get("error", f"HTTP {response.status_code}")))
        return SaveResponse(SaveStatus.SAVED)
