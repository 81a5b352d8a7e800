"""Access log middleware.

One line per request on the ``fitback.request`` logger. Requests that passed
the auth gate also carry the caller's user id.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fitback.core.logging import env_bool

logger = logging.getLogger("fitback.request")


def _request_extra(
    request: Request, status_code: int | None, duration_ms: float
) -> dict[str, Any]:
    extra: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
        "client_ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }
    user_id = getattr(request.state, "user_id", None)
    if user_id is not None:
        extra["user_id"] = user_id
    return extra


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        status_code: int | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - started) * 1000.0
            # No status means the app raised past every exception handler.
            level = (
                logging.ERROR
                if status_code is None or status_code >= 500
                else logging.INFO
            )
            logger.log(
                level,
                "%s %s -> %s (%.2fms)",
                request.method,
                request.url.path,
                status_code,
                duration_ms,
                extra=_request_extra(request, status_code, duration_ms),
            )


def add_request_logging_middleware(app: FastAPI) -> None:
    """Attach the access log middleware unless LOG_REQUESTS is off."""
    if env_bool("LOG_REQUESTS", default=True):
        app.add_middleware(RequestLoggingMiddleware)
