"""Prompts for turning free text, page HTML or a photo into recipe JSON."""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from pydantic import BaseModel

from recipe_catalog.schemas.importing import ImportedRecipe

from .base import BasePrompt


RECIPE_JSON_STRUCTURE = """{
  "title": "string",
  "yield": "string",
  "cookingTime": number (minutes),
  "caloriesPerServing": number | null,
  "ingredients": ["string"],
  "instructions": ["string"],
  "categories": ["string"],
  "seasons": ["string"],
  "events": ["string"],
  "imageUrl": "string (URL of the main recipe image found on the page)",
  "notes": "string"
}"""

_SOURCE_LABELS = {"text": "text", "html": "web page HTML"}


class _RecipePrompt(BasePrompt[ImportedRecipe]):
    output_schema: ClassVar[type[BaseModel]] = ImportedRecipe

    def parse(self, data: dict[str, Any]) -> ImportedRecipe:
        return ImportedRecipe.from_model_output(data)


class RecipeExtractionPrompt(_RecipePrompt):
    """Extract a recipe from pasted text or a page's HTML.

    The answer is read leniently into ImportedRecipe, so a partially
    filled structure is still usable.
    """

    def format(self, content: str = "", source: Literal["text", "html"] = "text", **_: Any) -> str:
        """Build the prompt for ``content`` of the given source kind."""
        if not content:
            msg = "content is required"
            raise ValueError(msg)
        return (
            f"Extract recipe information from the following {_SOURCE_LABELS[source]}.\n"
            "Return ONLY valid JSON with this structure:\n"
            f"{RECIPE_JSON_STRUCTURE}\n\n"
            "Content:\n"
            f"{content}"
        )


class RecipePhotoPrompt(_RecipePrompt):
    """Extract a recipe from an attached image."""

    def format(self, **_: Any) -> str:
        """The image travels as inline data; the text only names the schema."""
        return (
            "Extract recipe from this image. Return ONLY valid JSON matching the "
            "schema: { title, yield, cookingTime, caloriesPerServing, ingredients, "
            "instructions, categories, seasons, events, notes }"
        )
