"""Integration test fixtures.

The app runs in-process through ASGITransport with its lifespan entered, so
every test gets a real store on a per-test data file. Model calls are never
made: import tests swap in a service whose client is an AsyncMock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from recipe_catalog.core.lifespan import lifespan
from recipe_catalog.core.rate_limit import limiter
from recipe_catalog.factory import create_app
from recipe_catalog.services.importing import RecipeImportService
from tests.fixtures.llm_responses import EXTRACTED_RECIPE


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

    from fastapi import FastAPI

    from recipe_catalog.core.config import Settings


pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def reset_rate_limits() -> Generator[None]:
    """Start every test with empty in-memory rate limit counters."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """Create FastAPI app with test settings."""
    return create_app(test_settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client against a started application."""
    async with (
        lifespan(app),
        AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac,
    ):
        yield ac


@pytest.fixture
def llm_client() -> AsyncMock:
    """Configured model client returning a canned extraction."""
    mock = AsyncMock()
    mock.is_configured = True
    mock.generate_json.return_value = dict(EXTRACTED_RECIPE)
    return mock


@pytest.fixture
async def import_client(
    app: FastAPI,
    client: AsyncClient,
    llm_client: AsyncMock,
) -> AsyncClient:
    """Client whose app imports through the mocked model client."""
    await app.state.import_service.shutdown()
    service = RecipeImportService(llm_client, app.state.settings.importing)
    await service.initialize()
    app.state.import_service = service
    return client
