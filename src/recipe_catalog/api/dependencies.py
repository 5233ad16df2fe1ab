"""FastAPI dependencies for service access.

Services are created during application startup and stored in app.state.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from recipe_catalog.core.config import Settings
from recipe_catalog.core.exceptions import ServiceUnavailableError
from recipe_catalog.services.importing import RecipeImportService
from recipe_catalog.storage import JsonRecipeStore


async def get_recipe_store(request: Request) -> JsonRecipeStore:
    """Get the recipe store from app state.

    Raises:
        ServiceUnavailableError: 503 if the store is not initialized.
    """
    store: JsonRecipeStore | None = getattr(request.app.state, "recipe_store", None)
    if store is None:
        msg = "Recipe store not available"
        raise ServiceUnavailableError(msg)
    return store


async def get_import_service(request: Request) -> RecipeImportService:
    """Get the recipe import service from app state.

    Raises:
        ServiceUnavailableError: 503 if the service is not initialized.
    """
    service: RecipeImportService | None = getattr(request.app.state, "import_service", None)
    if service is None:
        msg = "Recipe import service not available"
        raise ServiceUnavailableError(msg)
    return service


async def get_app_settings(request: Request) -> Settings:
    """Get the settings the application was created with."""
    settings: Settings = request.app.state.settings
    return settings


RecipeStoreDep = Annotated[JsonRecipeStore, Depends(get_recipe_store)]
ImportServiceDep = Annotated[RecipeImportService, Depends(get_import_service)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
