"""Fill in missing recipe images from their source pages.

Maintenance task behind ``scripts/backfill_images.py``: for every recipe that
has a ``sourceUrl`` but no ``imageUrl``, fetch the page, ask the model for the
main image and save it through the store.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from recipe_catalog.core.logging import get_logger
from recipe_catalog.schemas import RecipeUpdate
from recipe_catalog.services.importing import (
    ImportConfigurationError,
    RecipeImportError,
)
from recipe_catalog.storage import RecipeStorageError


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from recipe_catalog.schemas import Recipe
    from recipe_catalog.services.importing import RecipeImportService
    from recipe_catalog.storage import JsonRecipeStore


logger = get_logger(__name__)


@dataclass
class BackfillReport:
    """Counts from one backfill run."""

    candidates: int = 0
    updated: int = 0
    not_found: int = 0
    failed: int = 0


def needs_image(recipe: Recipe) -> bool:
    """Whether a recipe has a source page but no image yet."""
    return bool(recipe.source_url) and not recipe.image_url


async def backfill_images(
    store: JsonRecipeStore,
    import_service: RecipeImportService,
    *,
    delay: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> BackfillReport:
    """Look up and save images for recipes that lack one.

    Per-recipe failures are logged and skipped.

    Args:
        store: Recipe store to read and update.
        import_service: Used to fetch pages and query the model.
        delay: Seconds to wait between recipes.
        sleep: Awaitable sleep, replaceable in tests.

    Raises:
        ImportConfigurationError: If the model is not configured.
    """
    if not import_service.llm_ready:
        msg = "Image backfill requires GEMINI_API_KEY"
        raise ImportConfigurationError(msg)

    candidates = [recipe for recipe in await store.list() if needs_image(recipe)]
    report = BackfillReport(candidates=len(candidates))
    logger.info("Starting image backfill", candidates=report.candidates)

    for index, recipe in enumerate(candidates):
        if index and delay > 0:
            await sleep(delay)

        assert recipe.source_url is not None
        try:
            image_url = await import_service.find_image_for_url(recipe.source_url, recipe.title)
        except RecipeImportError as e:
            logger.warning("Image lookup failed", recipe_id=recipe.id, error=str(e))
            report.failed += 1
            continue

        if not image_url:
            logger.info("No image found", recipe_id=recipe.id, title=recipe.title)
            report.not_found += 1
            continue

        try:
            await store.update(recipe.id, RecipeUpdate(image_url=image_url))
        except RecipeStorageError as e:
            logger.error("Failed to save image", recipe_id=recipe.id, error=str(e))
            report.failed += 1
            continue

        logger.info("Image saved", recipe_id=recipe.id, image_url=image_url)
        report.updated += 1

    logger.info(
        "Image backfill complete",
        updated=report.updated,
        not_found=report.not_found,
        failed=report.failed,
    )
    return report
