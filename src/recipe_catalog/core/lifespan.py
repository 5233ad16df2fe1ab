"""Application lifespan event handlers.

This module defines the lifespan context manager that handles:
- Application startup: configure logging, open the recipe store, create the
  Gemini client and the import service
- Application shutdown: close HTTP clients
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.core.logging import get_logger, setup_logging
from recipe_catalog.llm import GeminiClient
from recipe_catalog.services.importing import RecipeImportService
from recipe_catalog.storage import JsonRecipeStore


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI

    from recipe_catalog.llm import LLMClientProtocol


logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
        log_file=settings.logging.file,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    app.state.recipe_store = _init_store(settings)

    llm_client: LLMClientProtocol | None = None
    if settings.llm.enabled:
        llm_client = _create_llm_client(settings)
    else:
        logger.info("LLM disabled - imports limited to structured page data")

    # Import is optional: the catalog keeps working without it
    try:
        import_service = RecipeImportService(llm_client, settings.importing)
        await import_service.initialize()
        app.state.import_service = import_service
    except Exception:
        logger.exception("Failed to initialize RecipeImportService - import unavailable")
        app.state.import_service = None

    logger.info("Application startup complete")


def _init_store(settings: Settings) -> JsonRecipeStore:
    """Create the recipe store (critical service)."""
    store = JsonRecipeStore(
        settings.storage.data_file,
        indent=settings.storage.indent,
        app_name=settings.app.name,
        version=settings.app.version,
    )
    logger.info("Recipe store ready", data_file=str(store.data_file))
    return store


def _create_llm_client(settings: Settings) -> GeminiClient:
    """Create the Gemini client. A missing key is reported, not fatal."""
    gemini = settings.llm.gemini
    client = GeminiClient(
        api_key=settings.gemini_api_key,
        model=gemini.model,
        base_url=gemini.url,
        timeout=gemini.timeout,
        max_retries=gemini.max_retries,
        requests_per_minute=gemini.requests_per_minute,
    )
    if client.is_configured:
        logger.info("Gemini client configured", model=gemini.model)
    else:
        logger.warning("GEMINI_API_KEY not set - model-based import unavailable")
    return client


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services.

    Args:
        app: The FastAPI application instance.
    """
    logger.info("Shutting down application")

    import_service = getattr(app.state, "import_service", None)
    if import_service is not None:
        await import_service.shutdown()
        app.state.import_service = None

    app.state.recipe_store = None
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Uses the settings the app was created with, falling back to
    ``get_settings()``.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)
