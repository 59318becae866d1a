import logging
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse

from .errors import AuthError


logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return f"{int(time.time() * 1000)}-{id(request)}"


async def log_requests(request: Request, call_next: Callable):
    start_time = time.time()
    request_id = _request_id(request)

    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        # Only log slow requests (>1s) or errors
        if process_time > 1.0 or response.status_code >= 400:
            logger.info(f"[{request_id}] {request.method} {request.url.path} - {response.status_code} - {process_time:.2f}s")
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"[{request_id}] {request.method} {request.url.path} - ERROR: {str(e)} - {process_time:.2f}s")
        raise


def limit_body_size(max_bytes: int) -> Callable:
    """Reject requests that announce a body larger than ``max_bytes``."""

    async def _limit_body_size(request: Request, call_next: Callable):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > max_bytes:
            logger.warning(f"Rejected {request.method} {request.url.path}: body of {length} bytes exceeds {max_bytes}")
            return JSONResponse(status_code=413, content={"error": "Payload too large"})
        return await call_next(request)

    return _limit_body_size


async def auth_exception_handler(request: Request, exc: AuthError):
    logger.info(f"Unauthorized {request.method} {request.url.path}: {exc.reason}")
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.error(f"[{request_id}] Unhandled exception in {request.method} {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
