"""Recipe schemas.

Field names on the wire and in the data file are camelCase; ``yield`` is a
Python keyword, so the attribute is ``recipe_yield`` with an explicit alias.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import ConfigDict, Field, model_validator

from recipe_catalog.schemas.base import APIRequest, APIResponse, StoredDocument
from recipe_catalog.schemas.coercion import (
    LenientInt,
    LenientNumber,
    LenientStr,
    StoredOptionalInt,
    StoredStrList,
    StoredText,
)


# =============================================================================
# Input Schemas
# =============================================================================


class RecipeCreate(APIRequest):
    """Caller-supplied fields for a new recipe (everything but id and createdAt)."""

    title: str = Field(min_length=1, description="Recipe title")
    recipe_yield: str = Field(
        default="",
        alias="yield",
        description="Free-text yield, e.g. '4 servings'",
    )
    base_servings: int | None = Field(
        default=None,
        ge=1,
        description="Servings the ingredient amounts are written for",
    )
    cooking_time: int = Field(default=0, ge=0, description="Cooking time in minutes")
    categories: list[str] = Field(default_factory=list)
    seasons: list[str] = Field(default_factory=list)
    events: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    image_url: str | None = None
    source_url: str | None = None
    notes: str | None = None
    calories_per_serving: float | None = Field(default=None, ge=0)


_NON_NULLABLE_UPDATE_FIELDS = frozenset(
    {
        "title",
        "recipe_yield",
        "cooking_time",
        "categories",
        "seasons",
        "events",
        "ingredients",
        "instructions",
    }
)


class RecipeUpdate(APIRequest):
    """Partial recipe update.

    Only fields present in the request body are applied; ``id`` and
    ``createdAt`` are ignored if sent. Unknown keys are kept and merged into
    the stored document as sent.
    """

    model_config = ConfigDict(extra="allow")

    title: str | None = Field(default=None, min_length=1)
    recipe_yield: str | None = Field(default=None, alias="yield")
    base_servings: int | None = Field(default=None, ge=1)
    cooking_time: int | None = Field(default=None, ge=0)
    categories: list[str] | None = None
    seasons: list[str] | None = None
    events: list[str] | None = None
    ingredients: list[str] | None = None
    instructions: list[str] | None = None
    image_url: str | None = None
    source_url: str | None = None
    notes: str | None = None
    calories_per_serving: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> Self:
        nulled = sorted(
            self.__class__.model_fields[name].alias or name
            for name in self.model_fields_set & _NON_NULLABLE_UPDATE_FIELDS
            if getattr(self, name) is None
        )
        if nulled:
            msg = f"Fields cannot be null: {', '.join(nulled)}"
            raise ValueError(msg)
        return self

    def changes(self) -> dict[str, Any]:
        """Supplied fields keyed by their wire names, unknown keys included."""
        extra = self.model_extra or {}
        known = self.model_dump(by_alias=True, exclude_unset=True, exclude=set(extra))
        return {**known, **extra}


# =============================================================================
# Stored Schemas
# =============================================================================


class Recipe(StoredDocument):
    """A recipe as persisted in the data file and returned by the API.

    Files may hold values written without validation, such as
    ``"cookingTime": "30分"``; fields other than ``id`` and ``createdAt``
    are coerced on read rather than rejected.
    """

    id: int = Field(description="Unique identifier")
    title: LenientStr
    recipe_yield: LenientStr = Field(default="", alias="yield")
    base_servings: StoredOptionalInt = None
    cooking_time: LenientInt = 0
    categories: StoredStrList = Field(default_factory=list)
    seasons: StoredStrList = Field(default_factory=list)
    events: StoredStrList = Field(default_factory=list)
    ingredients: StoredStrList = Field(default_factory=list)
    instructions: StoredStrList = Field(default_factory=list)
    image_url: StoredText = None
    source_url: StoredText = None
    notes: StoredText = None
    created_at: int = Field(description="Creation time in epoch milliseconds")
    calories_per_serving: LenientNumber = None

    def to_document(self) -> dict[str, Any]:
        """Serialize for the data file, keeping only fields that were present."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class RecipeDatabase(StoredDocument):
    """The persisted container: recipes plus optional export metadata."""

    recipes: list[Recipe] = Field(default_factory=list)
    export_date: StoredText = None
    version: StoredText = None
    app_name: StoredText = None

    def to_document(self) -> dict[str, Any]:
        """Serialize for the data file.

        ``recipes`` is always written; metadata only when it was present.
        """
        metadata = self.model_dump(by_alias=True, exclude_unset=True, exclude={"recipes"})
        return {"recipes": [recipe.to_document() for recipe in self.recipes], **metadata}


# =============================================================================
# Response Schemas
# =============================================================================


class DeleteResponse(APIResponse):
    """Result of a successful delete."""

    success: bool = True
