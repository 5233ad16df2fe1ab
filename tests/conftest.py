"""Shared test fixtures.

Selects the test configuration before any application module reads settings.
"""

from __future__ import annotations

import os


os.environ.setdefault("APP_ENV", "test")

from typing import TYPE_CHECKING, Any  # noqa: E402

import pytest  # noqa: E402

from recipe_catalog.core.config import Settings  # noqa: E402
from recipe_catalog.core.config.settings import (  # noqa: E402
    AppSettings,
    ImportingSettings,
    LLMSettings,
    LoggingSettings,
    MetricsSettings,
    StorageSettings,
)
from recipe_catalog.schemas import Recipe  # noqa: E402
from recipe_catalog.storage import JsonRecipeStore  # noqa: E402


if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Location of a per-test recipe data file (not created)."""
    return tmp_path / "data" / "recipes.json"


@pytest.fixture
def store(data_file: Path) -> JsonRecipeStore:
    """Recipe store over an empty per-test data file."""
    return JsonRecipeStore(data_file, app_name="Test Catalog", version="0.0.1-test")


@pytest.fixture
def test_settings(data_file: Path) -> Settings:
    """Settings for in-process app tests: tmp data file, no metrics, no API key."""
    return Settings(
        APP_ENV="test",
        GEMINI_API_KEY="",
        app=AppSettings(name="Test Catalog", version="0.0.1-test", debug=True),
        storage=StorageSettings(data_file=data_file),
        logging=LoggingSettings(level="DEBUG", format="json"),
        llm=LLMSettings(enabled=True),
        importing=ImportingSettings(default_timeout=5.0, max_timeout=10.0),
        metrics=MetricsSettings(enabled=False),
    )


@pytest.fixture
def recipe_factory() -> Callable[..., Recipe]:
    """Build stored recipes with sensible defaults."""

    def _make(**overrides: Any) -> Recipe:
        document: dict[str, Any] = {
            "id": 1,
            "title": "肉じゃが",
            "yield": "4人分",
            "cookingTime": 40,
            "categories": ["和食"],
            "seasons": ["通年"],
            "events": ["普段"],
            "ingredients": ["300g beef", "3 potatoes", "Salt to taste"],
            "instructions": ["Cut", "Simmer"],
            "createdAt": 1_700_000_000_000,
        }
        document.update(overrides)
        return Recipe.model_validate(document)

    return _make
