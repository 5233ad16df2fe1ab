"""Integration tests for export and vocabulary endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest


if TYPE_CHECKING:
    from httpx import AsyncClient


pytestmark = pytest.mark.integration


class TestExport:
    """Tests for GET /export."""

    async def test_export_empty(self, client: AsyncClient) -> None:
        """Should stamp the export even when there are no recipes."""
        response = await client.get("/api/export")

        assert response.status_code == 200
        assert "attachment" in response.headers["Content-Disposition"]
        body = response.json()
        assert body["recipes"] == []
        assert body["appName"] == "Test Catalog"
        assert body["version"] == "0.0.1-test"
        assert body["exportDate"].startswith("20")

    async def test_export_contains_recipes(self, client: AsyncClient) -> None:
        created = await client.post("/api/recipes", json={"title": "Miso soup"})

        body = (await client.get("/api/export")).json()

        assert [recipe["id"] for recipe in body["recipes"]] == [created.json()["id"]]
        assert body["recipes"][0]["title"] == "Miso soup"


class TestVocabulary:
    """Tests for GET /vocabulary."""

    async def test_vocabulary(self, client: AsyncClient) -> None:
        response = await client.get("/api/vocabulary")

        assert response.status_code == 200
        body = response.json()
        assert "和食" in body["categories"]
        assert "通年" in body["seasons"]
        assert "普段" in body["events"]
        assert body["defaults"] == {"seasons": ["通年"], "events": ["普段"], "cookingTime": 30}
