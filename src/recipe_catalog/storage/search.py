"""In-memory recipe search and tag filtering."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable

    from recipe_catalog.schemas.recipe import Recipe


def matches_query(recipe: Recipe, query: str) -> bool:
    """Case-insensitive substring match on the title or any ingredient line."""
    needle = query.lower()
    if needle in recipe.title.lower():
        return True
    return any(needle in line.lower() for line in recipe.ingredients)


def filter_recipes(
    recipes: Iterable[Recipe],
    *,
    query: str | None = None,
    category: str | None = None,
    season: str | None = None,
    event: str | None = None,
) -> list[Recipe]:
    """Keep recipes matching every given criterion, preserving order.

    Tag criteria are exact matches against the recipe's tag lists; empty or
    missing criteria match everything.
    """
    return [
        recipe
        for recipe in recipes
        if (not query or matches_query(recipe, query))
        and (not category or category in recipe.categories)
        and (not season or season in recipe.seasons)
        and (not event or event in recipe.events)
    ]
