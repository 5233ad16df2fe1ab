"""Read-only catalog views: scaled ingredients, vocabulary, health."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from recipe_catalog.schemas.base import APIResponse


# Suggested values offered by recipe forms; never used for validation.
SUGGESTED_CATEGORIES = ("和食", "洋食", "中華", "デザート", "その他")
SUGGESTED_SEASONS = ("春", "夏", "秋", "冬", "通年")
SUGGESTED_EVENTS = (
    "お正月",
    "バレンタイン",
    "ひな祭り",
    "ハロウィン",
    "クリスマス",
    "誕生日",
    "パーティー",
    "普段",
)
DEFAULT_SEASONS = ("通年",)
DEFAULT_EVENTS = ("普段",)
DEFAULT_COOKING_TIME = 30


class ScaledIngredient(APIResponse):
    """One ingredient line adjusted for a serving count."""

    original: str = Field(description="Ingredient line as stored")
    amount: float | None = Field(description="Parsed leading amount, if any")
    scaled_amount: float | None = Field(description="Amount times the scale factor")
    text: str = Field(description="Description after the amount")
    display: str = Field(description="Formatted line for display")


class ScaledRecipe(APIResponse):
    """Ingredient list of a recipe scaled to a target serving count."""

    recipe_id: int
    title: str
    base_servings: float
    servings: float
    scale_factor: float
    ingredients: list[ScaledIngredient]


class FormDefaults(APIResponse):
    """Initial values for a new-recipe form."""

    seasons: list[str] = Field(default_factory=lambda: list(DEFAULT_SEASONS))
    events: list[str] = Field(default_factory=lambda: list(DEFAULT_EVENTS))
    cooking_time: int = DEFAULT_COOKING_TIME


class Vocabulary(APIResponse):
    """Suggested tag values for categories, seasons and events."""

    categories: list[str] = Field(default_factory=lambda: list(SUGGESTED_CATEGORIES))
    seasons: list[str] = Field(default_factory=lambda: list(SUGGESTED_SEASONS))
    events: list[str] = Field(default_factory=lambda: list(SUGGESTED_EVENTS))
    defaults: FormDefaults = Field(default_factory=FormDefaults)


class HealthResponse(APIResponse):
    """Liveness response with component status."""

    status: str = Field(description="Overall status", examples=["healthy"])
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str
    environment: str
    checks: dict[str, str] = Field(
        default_factory=dict,
        description="Status of the data file and the import model",
    )
