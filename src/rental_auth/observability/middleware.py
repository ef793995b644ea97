"""
rental_auth.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs.
- Tag requests by caller kind (auth engine hook vs. bearer client).
- Emit one access line per request with status and latency; probes are skipped.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from rental_auth.observability.logging import get_logger

log = get_logger(__name__)

HOOK_PATH_PREFIX = "/v1/hooks/"
UNLOGGED_PATHS = frozenset({"/healthz", "/readyz", "/metrics"})


def caller_kind(path: str) -> str:
    return "auth_engine" if path.startswith(HOOK_PATH_PREFIX) else "client"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        # The auth engine forwards its own request id on hook calls when it has one.
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        path = request.url.path
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=path,
            method=request.method,
            caller_kind=caller_kind(path),
        )
        started = time.perf_counter()
        status_code = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
        finally:
            if path not in UNLOGGED_PATHS:
                log.info(
                    "request_completed",
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Endpoints run in a child task under BaseHTTPMiddleware, so a principal id bound
# inside a handler appears on that handler's lines, not on the access line.
