"""Recipe import schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from recipe_catalog.schemas.base import APIRequest, APIResponse
from recipe_catalog.schemas.coercion import (
    LenientInt,
    LenientNumber,
    LenientServings,
    LenientStr,
    LenientStrList,
    OptionalStr,
)


ImportSourceType = Literal["text", "url", "image"]


class ImportRequest(APIRequest):
    """Body of ``POST /import``."""

    type: ImportSourceType = Field(description="What ``content`` holds")
    content: str = Field(
        min_length=1,
        description="Recipe text, a page URL, or base64 image data",
    )
    mime_type: str | None = Field(
        default=None,
        description="Image MIME type (defaults to image/jpeg)",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait before giving up (capped by configuration)",
    )


class ImportedRecipe(APIResponse):
    """Best-effort recipe guess in the shape accepted by ``POST /recipes``.

    Model output is loosely typed, so every field is coerced: missing
    values take defaults, ``null`` lists become empty, numbers are pulled
    out of strings such as ``"30分"``.
    """

    title: LenientStr = ""
    recipe_yield: LenientStr = Field(default="", alias="yield")
    base_servings: LenientServings = None
    cooking_time: LenientInt = 0
    calories_per_serving: LenientNumber = None
    categories: LenientStrList = Field(default_factory=list)
    seasons: LenientStrList = Field(default_factory=list)
    events: LenientStrList = Field(default_factory=list)
    ingredients: LenientStrList = Field(default_factory=list)
    instructions: LenientStrList = Field(default_factory=list)
    image_url: OptionalStr = None
    source_url: OptionalStr = None
    notes: OptionalStr = None

    @classmethod
    def from_model_output(cls, data: dict[str, Any]) -> ImportedRecipe:
        """Build from a parsed model response, ignoring unknown keys."""
        known = {
            key: value
            for key, value in data.items()
            if key in _IMPORTED_KEYS
        }
        return cls.model_validate(known)


_IMPORTED_KEYS = frozenset(
    key
    for name, field in ImportedRecipe.model_fields.items()
    for key in (name, field.alias)
    if key
)
