"""Recipe import gateway: text, web pages and photos to recipe JSON."""

from recipe_catalog.services.importing.exceptions import (
    ImportConfigurationError,
    ImportExtractionError,
    ImportFetchError,
    ImportTimeoutError,
    RecipeImportError,
)
from recipe_catalog.services.importing.service import RecipeImportService, split_data_url


__all__ = [
    "ImportConfigurationError",
    "ImportExtractionError",
    "ImportFetchError",
    "ImportTimeoutError",
    "RecipeImportError",
    "RecipeImportService",
    "split_data_url",
]
