"""Recipe endpoints.

Provides:
- CRUD on /recipes backed by the JSON recipe store
- GET /recipes/{recipe_id}/scaled for ingredient amounts at a chosen serving count
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from recipe_catalog.api.dependencies import RecipeStoreDep  # noqa: TC001
from recipe_catalog.core.exceptions import NotFoundError, StorageUnavailableError
from recipe_catalog.core.logging import get_logger
from recipe_catalog.scaling import ServingScaler
from recipe_catalog.schemas import (
    DeleteResponse,
    Recipe,
    RecipeCreate,
    RecipeUpdate,
    ScaledIngredient,
    ScaledRecipe,
)
from recipe_catalog.storage import RecipeStorageError, filter_recipes


logger = get_logger(__name__)

router = APIRouter(prefix="/recipes", tags=["Recipes"])

RecipeId = Annotated[int, Path(description="Recipe identifier")]

_STORAGE_ERROR_RESPONSE = {500: {"description": "The data file could not be written"}}


@router.get(
    "",
    response_model=list[Recipe],
    summary="List recipes",
    description=(
        "All recipes, newest first. Optional filters: ``q`` matches the title "
        "or any ingredient line case-insensitively; ``category``, ``season`` "
        "and ``event`` match tags exactly."
    ),
)
async def list_recipes(
    store: RecipeStoreDep,
    q: Annotated[str | None, Query(description="Search text")] = None,
    category: Annotated[str | None, Query()] = None,
    season: Annotated[str | None, Query()] = None,
    event: Annotated[str | None, Query()] = None,
) -> list[Recipe]:
    """List recipes, optionally filtered."""
    recipes = await store.list()
    return filter_recipes(recipes, query=q, category=category, season=season, event=event)


@router.post(
    "",
    response_model=Recipe,
    status_code=status.HTTP_201_CREATED,
    summary="Create a recipe",
    responses=_STORAGE_ERROR_RESPONSE,
)
async def create_recipe(body: RecipeCreate, store: RecipeStoreDep) -> Recipe:
    """Create a recipe; the id and creation time are assigned by the store."""
    try:
        return await store.create(body)
    except RecipeStorageError as e:
        raise StorageUnavailableError from e


@router.get(
    "/{recipe_id}",
    response_model=Recipe,
    summary="Get a recipe",
    responses={404: {"description": "Recipe not found"}},
)
async def get_recipe(recipe_id: RecipeId, store: RecipeStoreDep) -> Recipe:
    """Get one recipe by id."""
    recipe = await store.get(recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe", recipe_id)
    return recipe


@router.put(
    "/{recipe_id}",
    response_model=Recipe,
    summary="Update a recipe",
    description=(
        "Partial update: fields present in the body replace the stored values "
        "(lists are replaced, not merged); omitted fields are kept."
    ),
    responses={404: {"description": "Recipe not found"}, **_STORAGE_ERROR_RESPONSE},
)
async def update_recipe(
    recipe_id: RecipeId,
    body: RecipeUpdate,
    store: RecipeStoreDep,
) -> Recipe:
    """Apply a partial update to a recipe."""
    try:
        recipe = await store.update(recipe_id, body)
    except RecipeStorageError as e:
        raise StorageUnavailableError from e
    if recipe is None:
        raise NotFoundError("Recipe", recipe_id)
    return recipe


@router.delete(
    "/{recipe_id}",
    response_model=DeleteResponse,
    summary="Delete a recipe",
    responses={404: {"description": "Recipe not found"}, **_STORAGE_ERROR_RESPONSE},
)
async def delete_recipe(recipe_id: RecipeId, store: RecipeStoreDep) -> DeleteResponse:
    """Delete a recipe."""
    try:
        deleted = await store.delete(recipe_id)
    except RecipeStorageError as e:
        raise StorageUnavailableError from e
    if not deleted:
        raise NotFoundError("Recipe", recipe_id)
    return DeleteResponse(success=True)


@router.get(
    "/{recipe_id}/scaled",
    response_model=ScaledRecipe,
    summary="Scale ingredients to a serving count",
    description=(
        "Ingredient lines with their leading amounts multiplied by "
        "servings / base servings. Lines without an amount are returned as is. "
        "Nothing is saved."
    ),
    responses={404: {"description": "Recipe not found"}},
)
async def get_scaled_recipe(
    recipe_id: RecipeId,
    store: RecipeStoreDep,
    servings: Annotated[
        float | None,
        Query(ge=1, description="Target servings (defaults to the base servings)"),
    ] = None,
    fractions: Annotated[
        bool,
        Query(description="Render amounts as fractions such as 3/2"),
    ] = False,
) -> ScaledRecipe:
    """Return a recipe's ingredients scaled for display."""
    recipe = await store.get(recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe", recipe_id)

    scaler = ServingScaler.for_recipe(recipe, fractions=fractions)
    if servings is not None:
        scaler.set_servings(servings)

    return ScaledRecipe(
        recipe_id=recipe.id,
        title=recipe.title,
        base_servings=scaler.base_servings,
        servings=scaler.servings,
        scale_factor=scaler.factor,
        ingredients=[
            ScaledIngredient(
                original=line.original,
                amount=line.amount,
                scaled_amount=line.scaled_amount,
                text=line.text,
                display=line.display,
            )
            for line in scaler.scale_lines(recipe.ingredients)
        ],
    )
