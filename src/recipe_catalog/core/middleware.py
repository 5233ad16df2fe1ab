"""Request context middleware.

One middleware per request that:
- propagates or generates ``X-Request-ID`` and binds it to the log context
- logs request start and completion with method, path and status
- adds ``X-Process-Time`` and warns about slow requests
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recipe_catalog.core.logging import bind_context, clear_context, get_logger


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp


logger = get_logger(__name__)

SLOW_REQUEST_THRESHOLD = 1.0


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id, timing header and structured access logs."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        request_id_header: str = "X-Request-ID",
        timing_header: str = "X-Process-Time",
        slow_threshold: float = SLOW_REQUEST_THRESHOLD,
        quiet_paths: set[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.request_id_header = request_id_header
        self.timing_header = timing_header
        self.slow_threshold = slow_threshold
        self.quiet_paths = quiet_paths or {"/metrics", "/favicon.ico"}

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process the request inside a fresh logging context."""
        clear_context()
        request_id = request.headers.get(self.request_id_header) or str(uuid.uuid4())
        request.state.request_id = request_id
        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        quiet = request.url.path in self.quiet_paths or request.url.path.endswith(
            "/health"
        )
        if not quiet:
            logger.info(
                "Request started",
                query_params=str(request.query_params) if request.query_params else None,
                client_ip=_client_ip(request),
            )

        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time
        process_time_ms = round(process_time * 1000, 2)

        response.headers[self.request_id_header] = request_id
        response.headers[self.timing_header] = f"{process_time_ms}ms"

        if not quiet:
            logger.info(
                "Request completed",
                status_code=response.status_code,
                process_time_ms=process_time_ms,
            )
        if process_time > self.slow_threshold:
            logger.warning(
                "Slow request detected",
                process_time_ms=process_time_ms,
                threshold_ms=self.slow_threshold * 1000,
            )

        return response


def _client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"
