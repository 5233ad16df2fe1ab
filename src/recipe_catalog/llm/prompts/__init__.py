"""Prompt definitions for recipe import tasks."""

from .base import BasePrompt
from .image_lookup import ImageLookupPrompt, ImageLookupResult
from .recipe_extraction import RECIPE_JSON_STRUCTURE, RecipeExtractionPrompt, RecipePhotoPrompt


__all__ = [
    "RECIPE_JSON_STRUCTURE",
    "BasePrompt",
    "ImageLookupPrompt",
    "ImageLookupResult",
    "RecipeExtractionPrompt",
    "RecipePhotoPrompt",
]
