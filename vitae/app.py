import asyncio
import json
import logging
import time
from datetime import datetime
from typing import Any, Callable, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .core.config import Config
from .core.errors import AuthError, ContentValidationError, PersistenceIOError
from .core.middleware import (
    auth_exception_handler,
    global_exception_handler,
    limit_body_size,
    log_requests,
)
from .services.auth_tokens import TokenStore
from .services.content_store import ContentStore

logger = logging.getLogger(__name__)


class AsciiJSONResponse(JSONResponse):
    """JSON with non-ASCII escaped, so stored lone surrogates still encode."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, allow_nan=False, separators=(",", ":")).encode("ascii")


def bearer_token(request: Request) -> Optional[str]:
    """Pull the admin token from ``Authorization: Bearer`` or ``x-admin-token``."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[len("Bearer "):].strip() or None
    return request.headers.get("x-admin-token") or None


def require_admin(request: Request) -> str:
    token = bearer_token(request)
    request.app.state.tokens.require(token)
    return token


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (ValueError, RecursionError):
        return None


def create_app(config: Optional[Config] = None, *, clock: Callable[[], float] = time.time) -> FastAPI:
    """Build the content API around one store and one token map."""
    config = config or Config()

    app = FastAPI(title="Arcanum Vitae Content API", version=__version__, default_response_class=AsciiJSONResponse)
    app.state.config = config
    app.state.store = ContentStore(config.DATA_PATH)
    app.state.tokens = TokenStore(config.ADMIN_KEY, ttl_seconds=config.token_ttl_seconds, clock=clock)

    if not config.admin_enabled:
        logger.warning("ADMIN_KEY is not configured. Admin actions will be disabled.")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    body_limit = limit_body_size(config.MAX_BODY_BYTES)

    @app.middleware("http")
    async def _limit_body_size(request, call_next):
        return await body_limit(request, call_next)

    @app.middleware("http")
    async def _log_requests(request, call_next):
        return await log_requests(request, call_next)

    app.add_exception_handler(AuthError, auth_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    @app.get("/api/health")
    async def health_check():
        return {
            "status": "active",
            "service": "vitae-content-api",
            "timestamp": datetime.now().isoformat(),
        }

    @app.get("/api/data")
    async def get_data(request: Request):
        """Return the stored bundle, or null so the client uses its defaults."""
        store: ContentStore = request.app.state.store
        return await asyncio.to_thread(store.load)

    @app.post("/api/save")
    async def save_data(request: Request, _token: str = Depends(require_admin)):
        """Replace the stored bundle with the request body."""
        store: ContentStore = request.app.state.store
        payload = await _read_json(request)

        try:
            await asyncio.to_thread(store.save, payload)
        except ContentValidationError as e:
            logger.warning(f"Rejected save: {e.errors}")
            return JSONResponse(status_code=400, content={"error": "Invalid data", "details": e.errors})
        except PersistenceIOError as e:
            logger.error(f"Save failed: {e}")
            return JSONResponse(status_code=500, content={"error": "Failed to save data"})

        return {"success": True}

    @app.post("/api/auth")
    async def authenticate(request: Request):
        """Exchange the admin passkey for a short-lived bearer token."""
        tokens: TokenStore = request.app.state.tokens
        if not tokens.enabled:
            return JSONResponse(status_code=503, content={"error": "Admin key not configured"})

        body = await _read_json(request)
        passkey = body.get("passkey") if isinstance(body, dict) else None
        if not isinstance(passkey, str) or not passkey:
            return JSONResponse(status_code=400, content={"error": "Missing passkey"})

        try:
            issued = tokens.authenticate(passkey)
        except AuthError:
            return JSONResponse(status_code=401, content={"error": "Invalid passkey"})

        return {"token": issued.token, "expiresAt": issued.expires_at_iso()}

    @app.get("/api/auth/verify")
    async def verify_token(_token: str = Depends(require_admin)):
        return {"ok": True}

    @app.post("/api/auth/logout")
    async def logout(request: Request, token: str = Depends(require_admin)):
        request.app.state.tokens.revoke(token)
        return {"ok": True}

    @app.get("/")
    async def root():
        """Return basic API information."""
        return {
            "service": "Arcanum Vitae Content API",
            "version": __version__,
            "endpoints": {
                "data": "/api/data",
                "save": "/api/save",
                "auth": "/api/auth",
                "verify": "/api/auth/verify",
                "logout": "/api/auth/logout",
                "health": "/api/health",
            },
            "timestamp": datetime.now().isoformat(),
        }

    return app


app = create_app()
