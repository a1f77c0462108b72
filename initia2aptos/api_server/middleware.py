"""
HTTP middleware — request context and debug request logging.

Binds method/path into the structlog context for every request so handler
logs carry them. With debug enabled, also logs each request (method, path,
query) and its status and latency.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from initia2aptos.bridge_logging import bind_request, clear_request, get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, debug: bool = False) -> None:
        super().__init__(app)
        self._debug = debug

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        bind_request(request.method, request.url.path)
        start = time.perf_counter()
        if self._debug:
            logger.info(
                "request_received",
                query=dict(request.query_params),
                content_type=request.headers.get("content-type"),
            )
        try:
            response = await call_next(request)
            if self._debug:
                logger.info(
                    "request_completed",
                    status=response.status_code,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
            return response
        finally:
            clear_request()
