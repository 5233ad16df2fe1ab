"""Find and save images for recipes that have a source URL but no image.

Usage:
    GEMINI_API_KEY=... python scripts/backfill_images.py
    STORAGE__DATA_FILE=/path/to/recipes.json python scripts/backfill_images.py
"""

from __future__ import annotations

import asyncio
import sys

from recipe_catalog.core.config import get_settings
from recipe_catalog.core.logging import get_logger, setup_logging
from recipe_catalog.llm import GeminiClient
from recipe_catalog.services.backfill import backfill_images
from recipe_catalog.services.importing import ImportConfigurationError, RecipeImportService
from recipe_catalog.storage import JsonRecipeStore


logger = get_logger(__name__)


async def run() -> int:
    """Run one backfill pass over the configured data file."""
    settings = get_settings()
    setup_logging(
        log_level=settings.logging.level,
        log_format="text",
        is_development=True,
    )

    store = JsonRecipeStore(
        settings.storage.data_file,
        indent=settings.storage.indent,
        app_name=settings.app.name,
        version=settings.app.version,
    )
    gemini = settings.llm.gemini
    client = GeminiClient(
        api_key=settings.gemini_api_key,
        model=gemini.model,
        base_url=gemini.url,
        timeout=gemini.timeout,
        max_retries=gemini.max_retries,
        requests_per_minute=gemini.requests_per_minute,
    )
    service = RecipeImportService(client, settings.importing)
    await service.initialize()
    try:
        report = await backfill_images(
            store,
            service,
            delay=settings.importing.backfill_delay,
        )
    except ImportConfigurationError as e:
        logger.error("Cannot run image backfill", error=str(e))
        return 1
    finally:
        await service.shutdown()

    return 0 if report.failed == 0 else 2


if __name__ == "__main__":
    sys.exit(asyncio.run(run()))
