"""Recipe persistence."""

from recipe_catalog.storage.exceptions import RecipeStorageError
from recipe_catalog.storage.json_store import JsonRecipeStore
from recipe_catalog.storage.search import filter_recipes, matches_query


__all__ = [
    "JsonRecipeStore",
    "RecipeStorageError",
    "filter_recipes",
    "matches_query",
]
