"""Rate limiting using SlowAPI with in-memory storage.

The import endpoint is the only limited route: each import costs an LLM call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from recipe_catalog.core.config import get_settings
from recipe_catalog.core.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request


logger = get_logger(__name__)


def create_limiter() -> Limiter:
    """Create the process-wide limiter."""
    return Limiter(
        key_func=get_remote_address,
        storage_uri="memory://",
        strategy="fixed-window",
        headers_enabled=False,
    )


limiter = create_limiter()


def import_rate_limit() -> str:
    """Limit string for ``POST /import``, read from settings at request time."""
    return get_settings().importing.rate_limit


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """Render rate limit violations with the standard error envelope."""
    assert isinstance(exc, RateLimitExceeded)
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client_ip=get_remote_address(request),
        limit=str(exc.detail),
    )
    return ORJSONResponse(
        status_code=429,
        content={
            "error": "RATE_LIMIT_EXCEEDED",
            "message": "Too many requests. Please try again later.",
            "details": None,
            "requestId": getattr(request.state, "request_id", None),
        },
    )


def setup_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter and its exception handler to the application."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
