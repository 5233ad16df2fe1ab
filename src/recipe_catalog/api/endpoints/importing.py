"""Recipe import endpoint.

POST /import turns pasted text, a web page URL or a photo into a recipe
guess. Nothing is saved; clients review the result and then POST /recipes.
"""

# No postponed annotations here: slowapi's wrapper hides this module's globals.
from fastapi import APIRouter, Request

from recipe_catalog.api.dependencies import ImportServiceDep
from recipe_catalog.core.exceptions import ImportFailedError
from recipe_catalog.core.logging import get_logger
from recipe_catalog.core.rate_limit import import_rate_limit, limiter
from recipe_catalog.schemas import ImportedRecipe, ImportRequest
from recipe_catalog.services.importing import (
    ImportConfigurationError,
    RecipeImportError,
)


logger = get_logger(__name__)

router = APIRouter(tags=["Import"])


@router.post(
    "/import",
    response_model=ImportedRecipe,
    summary="Extract a recipe from text, a URL or an image",
    description=(
        "Best-effort extraction using a generative model. For URLs, structured "
        "page data is used when the model is unavailable. ``content`` holds the "
        "text, the URL, or base64 image data (a data: URL prefix is accepted)."
    ),
    responses={
        429: {"description": "Too many imports"},
        500: {
            "description": "Import failed",
            "content": {
                "application/json": {
                    "example": {
                        "error": "IMPORT_FAILED",
                        "message": "Server configuration error: Missing GEMINI_API_KEY",
                    }
                }
            },
        },
    },
)
@limiter.limit(import_rate_limit)
async def import_recipe(
    request: Request,
    body: ImportRequest,
    service: ImportServiceDep,
) -> ImportedRecipe:
    """Import a recipe guess."""
    try:
        return await service.import_recipe(body)
    except ImportConfigurationError as e:
        logger.error("Import unavailable", error=str(e))
        raise ImportFailedError(str(e)) from e
    except RecipeImportError as e:
        logger.warning("Import failed", source_type=body.type, error=str(e))
        raise ImportFailedError(str(e)) from e
