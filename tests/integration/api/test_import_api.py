"""Integration tests for POST /import."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest
import respx

from recipe_catalog.core.config.settings import ImportingSettings
from recipe_catalog.core.rate_limit import import_rate_limit
from recipe_catalog.services.importing.service import MISSING_KEY_MESSAGE
from tests.fixtures.llm_responses import RECIPE_PAGE_WITH_JSONLD


if TYPE_CHECKING:
    from unittest.mock import AsyncMock

    from fastapi import FastAPI
    from httpx import AsyncClient

    from recipe_catalog.core.config import Settings


pytestmark = pytest.mark.integration

IMPORT = "/api/import"
PAGE_URL = "https://example.com/recipes/curry"


class TestImportWithModel:
    """Imports through a configured model client."""

    async def test_text_import(self, import_client: AsyncClient, llm_client: AsyncMock) -> None:
        """Should return the model's recipe guess without saving it."""
        response = await import_client.post(
            IMPORT,
            json={"type": "text", "content": "親子丼の作り方..."},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "親子丼"
        assert body["yield"] == "2人分"
        assert body["ingredients"] == ["2 chicken thighs", "3 eggs", "1/2 onion"]
        llm_client.generate_json.assert_awaited_once()

        listing = await import_client.get("/api/recipes")
        assert listing.json() == []

    async def test_image_import(self, import_client: AsyncClient, llm_client: AsyncMock) -> None:
        response = await import_client.post(
            IMPORT,
            json={"type": "image", "content": "data:image/png;base64,iVBORw0KGgo="},
        )

        assert response.status_code == 200
        images = llm_client.generate_json.await_args.kwargs["images"]
        assert images[0].mime_type == "image/png"
        assert images[0].data == "iVBORw0KGgo="

    @respx.mock
    async def test_url_import_keeps_source_url(self, import_client: AsyncClient) -> None:
        respx.get(PAGE_URL).mock(return_value=httpx.Response(200, text=RECIPE_PAGE_WITH_JSONLD))

        response = await import_client.post(IMPORT, json={"type": "url", "content": PAGE_URL})

        assert response.status_code == 200
        assert response.json()["sourceUrl"] == PAGE_URL

    async def test_imported_recipe_can_be_saved(self, import_client: AsyncClient) -> None:
        """Should produce a body accepted by POST /recipes."""
        imported = await import_client.post(IMPORT, json={"type": "text", "content": "..."})

        created = await import_client.post("/api/recipes", json=imported.json())

        assert created.status_code == 201
        assert created.json()["title"] == "親子丼"


class TestImportWithoutModel:
    """Imports when no API key is configured."""

    async def test_text_import_reports_missing_key(self, client: AsyncClient) -> None:
        response = await client.post(IMPORT, json={"type": "text", "content": "recipe"})

        assert response.status_code == 500
        assert response.json()["error"] == "IMPORT_FAILED"
        assert response.json()["message"] == MISSING_KEY_MESSAGE

    @respx.mock
    async def test_url_import_uses_structured_data(self, client: AsyncClient) -> None:
        """Should fall back to JSON-LD on the page."""
        respx.get(PAGE_URL).mock(return_value=httpx.Response(200, text=RECIPE_PAGE_WITH_JSONLD))

        response = await client.post(IMPORT, json={"type": "url", "content": PAGE_URL})

        assert response.status_code == 200
        assert response.json()["title"] == "Weeknight Curry"


class TestImportValidation:
    """Request validation and availability."""

    @pytest.mark.parametrize(
        "body",
        [
            {"type": "pdf", "content": "x"},
            {"type": "text", "content": ""},
            {"type": "text", "content": "x", "timeout": 0},
            {"content": "x"},
        ],
    )
    async def test_rejects_invalid_body(self, client: AsyncClient, body: dict[str, object]) -> None:
        response = await client.post(IMPORT, json=body)

        assert response.status_code == 422
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_service_unavailable(self, client: AsyncClient, without_import_service: None) -> None:
        response = await client.post(IMPORT, json={"type": "text", "content": "x"})

        assert response.status_code == 503
        assert response.json()["error"] == "SERVICE_UNAVAILABLE"


class TestImportRateLimit:
    """Rate limiting of POST /import."""

    def test_limit_comes_from_settings(self) -> None:
        assert import_rate_limit() == "1000/minute"

    async def test_limit_exceeded(
        self,
        import_client: AsyncClient,
        test_settings: Settings,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Should answer 429 with the error envelope once the limit is used up."""
        limited = test_settings.model_copy(
            update={"importing": ImportingSettings(rate_limit="2/minute")}
        )
        monkeypatch.setattr("recipe_catalog.core.rate_limit.get_settings", lambda: limited)
        body = {"type": "text", "content": "recipe"}

        statuses = [(await import_client.post(IMPORT, json=body)).status_code for _ in range(3)]

        assert statuses == [200, 200, 429]
        response = await import_client.post(IMPORT, json=body)
        assert response.json()["error"] == "RATE_LIMIT_EXCEEDED"
        assert response.json()["requestId"] == response.headers["X-Request-ID"]


@pytest.fixture
async def without_import_service(app: FastAPI, client: AsyncClient) -> None:
    """Drop the import service from a started app."""
    await app.state.import_service.shutdown()
    app.state.import_service = None
