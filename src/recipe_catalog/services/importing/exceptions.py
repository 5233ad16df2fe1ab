"""Recipe import exceptions.

Caught by the import endpoint and reported as a failed import.
"""

from __future__ import annotations


class RecipeImportError(Exception):
    """Base exception for import failures."""


class ImportConfigurationError(RecipeImportError):
    """Raised when the model cannot be called, e.g. the API key is missing."""


class ImportFetchError(RecipeImportError):
    """Raised when a recipe page cannot be fetched."""


class ImportTimeoutError(RecipeImportError):
    """Raised when an import exceeds its time budget."""


class ImportExtractionError(RecipeImportError):
    """Raised when no recipe could be extracted from the content.

    Covers model failures, unparsable model output and pages without
    structured recipe data.
    """
