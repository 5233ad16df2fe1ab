"""Catalog-wide endpoints: export and suggested vocabulary."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from recipe_catalog.api.dependencies import RecipeStoreDep  # noqa: TC001
from recipe_catalog.schemas import Vocabulary


router = APIRouter(tags=["Catalog"])


@router.get(
    "/export",
    summary="Export the recipe database",
    description=(
        "The whole data file contents stamped with exportDate, version and "
        "appName, suitable for backup or re-import."
    ),
    response_class=ORJSONResponse,
    response_model=None,
)
async def export_database(store: RecipeStoreDep) -> ORJSONResponse:
    """Export all recipes."""
    database = await store.export()
    document: dict[str, Any] = database.to_document()
    return ORJSONResponse(
        content=document,
        headers={"Content-Disposition": 'attachment; filename="recipes.json"'},
    )


@router.get(
    "/vocabulary",
    response_model=Vocabulary,
    summary="Suggested tags",
    description=(
        "Suggested categories, seasons and events plus new-recipe defaults. "
        "Any tag value is accepted when saving; these are suggestions only."
    ),
)
async def get_vocabulary() -> Vocabulary:
    """Return the suggested tag vocabulary."""
    return Vocabulary()
