"""Prompt for locating a recipe's main image in page HTML."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import BasePrompt


class ImageLookupResult(BaseModel):
    """Output schema: the main image URL, or null when none fits."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    image_url: str | None = Field(default=None, alias="imageUrl")

    @field_validator("image_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ImageLookupPrompt(BasePrompt[ImageLookupResult]):
    """Ask for the URL of the main recipe image on a page."""

    output_schema: ClassVar[type[BaseModel]] = ImageLookupResult

    def format(self, html: str = "", title: str = "", **_: Any) -> str:
        """Build the prompt for ``html`` of the page for ``title``."""
        return (
            f'Analyze the following HTML content for the recipe titled "{title}".\n'
            "Find the URL of the MAIN recipe image.\n"
            'Return ONLY a JSON object with a single key "imageUrl".\n'
            "If no suitable image is found, return null for the value.\n\n"
            "HTML Content (truncated):\n"
            f"{html}"
        )
