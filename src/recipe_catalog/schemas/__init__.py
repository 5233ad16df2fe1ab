"""Pydantic schemas for request/response validation and persistence."""

from recipe_catalog.schemas.base import (
    APIRequest,
    APIResponse,
    DownstreamResponse,
    StoredDocument,
)
from recipe_catalog.schemas.catalog import (
    FormDefaults,
    HealthResponse,
    ScaledIngredient,
    ScaledRecipe,
    Vocabulary,
)
from recipe_catalog.schemas.importing import ImportedRecipe, ImportRequest
from recipe_catalog.schemas.recipe import (
    DeleteResponse,
    Recipe,
    RecipeCreate,
    RecipeDatabase,
    RecipeUpdate,
)


__all__ = [
    "APIRequest",
    "APIResponse",
    "DeleteResponse",
    "DownstreamResponse",
    "FormDefaults",
    "HealthResponse",
    "ImportRequest",
    "ImportedRecipe",
    "Recipe",
    "RecipeCreate",
    "RecipeDatabase",
    "RecipeUpdate",
    "ScaledIngredient",
    "ScaledRecipe",
    "StoredDocument",
    "Vocabulary",
]
