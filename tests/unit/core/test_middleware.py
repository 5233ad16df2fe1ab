"""Unit tests for RequestContextMiddleware."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from recipe_catalog.core.logging import get_context
from recipe_catalog.core.middleware import RequestContextMiddleware


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


pytestmark = pytest.mark.unit


def _build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/echo")
    async def echo(request: Request) -> dict[str, Any]:
        return {"requestId": request.state.request_id, "context": get_context()}

    return app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=_build_app()), base_url="http://test") as ac:
        yield ac


class TestRequestContextMiddleware:
    """Tests for request id and timing headers."""

    async def test_generates_request_id(self, client: AsyncClient) -> None:
        response = await client.get("/echo")

        request_id = response.headers["X-Request-ID"]
        assert len(request_id) == 36
        assert response.json()["requestId"] == request_id

    async def test_propagates_request_id(self, client: AsyncClient) -> None:
        response = await client.get("/echo", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["requestId"] == "req-123"

    async def test_binds_log_context(self, client: AsyncClient) -> None:
        """Should expose request id, method and path to loggers."""
        response = await client.get("/echo", headers={"X-Request-ID": "req-ctx"})

        assert response.json()["context"] == {
            "request_id": "req-ctx",
            "method": "GET",
            "path": "/echo",
        }

    async def test_process_time_header(self, client: AsyncClient) -> None:
        response = await client.get("/echo")

        assert response.headers["X-Process-Time"].endswith("ms")
        float(response.headers["X-Process-Time"].removesuffix("ms"))
