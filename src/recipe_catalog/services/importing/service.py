"""Recipe import service.

Turns pasted text, a web page or a photo into a recipe-shaped guess:
1. The generative model (Gemini) is the primary extractor for every source
2. For URLs, recipe-scrapers and then JSON-LD structured data are used when
   the model is unavailable, not configured, or fails

The service never touches the recipe store; callers decide whether to save.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import httpx
from recipe_scrapers import WebsiteNotImplementedError, scrape_html

from recipe_catalog.core.logging import get_logger
from recipe_catalog.core.metrics import record_import
from recipe_catalog.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMValidationError,
)
from recipe_catalog.llm.models import InlineData
from recipe_catalog.llm.prompts import (
    ImageLookupPrompt,
    ImageLookupResult,
    RecipeExtractionPrompt,
    RecipePhotoPrompt,
)
from recipe_catalog.schemas.importing import ImportedRecipe
from recipe_catalog.services.importing.exceptions import (
    ImportConfigurationError,
    ImportExtractionError,
    ImportFetchError,
    ImportTimeoutError,
    RecipeImportError,
)
from recipe_catalog.services.importing.jsonld import extract_recipe_from_jsonld


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from recipe_catalog.core.config.settings import ImportingSettings
    from recipe_catalog.llm.prompts import BasePrompt
    from recipe_catalog.llm.protocol import LLMClientProtocol
    from recipe_catalog.schemas.importing import ImportRequest


logger = get_logger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
MISSING_KEY_MESSAGE = "Server configuration error: Missing GEMINI_API_KEY"


def split_data_url(content: str) -> tuple[str, str | None]:
    """Split ``data:<mime>;base64,<payload>`` into payload and MIME type.

    Plain base64 input is returned unchanged with no MIME type.
    """
    if not content.startswith("data:") or "," not in content:
        return content, None
    header, payload = content.split(",", 1)
    mime_type = header.removeprefix("data:").split(";", 1)[0]
    return payload, mime_type or None


class RecipeImportService:
    """Extract recipes from text, URLs and images.

    Example:
        ```python
        service = RecipeImportService(gemini_client, settings.importing)
        await service.initialize()

        recipe = await service.import_recipe(
            ImportRequest(type="url", content="https://example.com/curry")
        )
        print(recipe.title, recipe.ingredients)

        await service.shutdown()
        ```
    """

    def __init__(
        self,
        llm_client: LLMClientProtocol | None,
        settings: ImportingSettings,
    ) -> None:
        """Initialize the import service.

        Args:
            llm_client: Model client; None when the model is disabled.
            settings: Import timeouts and page size limits.
        """
        self._llm_client = llm_client
        self._settings = settings
        self._http_client: httpx.AsyncClient | None = None
        self._text_prompt = RecipeExtractionPrompt()
        self._photo_prompt = RecipePhotoPrompt()
        self._image_lookup_prompt = ImageLookupPrompt()

    @property
    def llm_client(self) -> LLMClientProtocol | None:
        return self._llm_client

    @property
    def llm_ready(self) -> bool:
        """Whether the model can be called."""
        return self._llm_client is not None and self._llm_client.is_configured

    async def initialize(self) -> None:
        """Create the page-fetch HTTP client and initialize the model client."""
        if self._http_client is not None:
            return
        if self._llm_client is not None:
            await self._llm_client.initialize()
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.fetch_timeout),
            follow_redirects=True,
            headers={
                "User-Agent": BROWSER_USER_AGENT,
                "Accept": (
                    "text/html,application/xhtml+xml,application/xml;"
                    "q=0.9,image/webp,*/*;q=0.8"
                ),
            },
        )
        logger.info("RecipeImportService initialized", llm_ready=self.llm_ready)

    async def shutdown(self) -> None:
        """Release resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        if self._llm_client is not None:
            await self._llm_client.shutdown()
        logger.debug("RecipeImportService shutdown")

    def resolve_timeout(self, requested: float | None) -> float:
        """Time budget for one import: the request's, capped by configuration."""
        if requested is None:
            return self._settings.default_timeout
        return min(requested, self._settings.max_timeout)

    async def import_recipe(self, request: ImportRequest) -> ImportedRecipe:
        """Produce a recipe guess for an import request.

        Args:
            request: Source type, content and optional timeout.

        Returns:
            ImportedRecipe ready to pass to the store's create operation.

        Raises:
            ImportConfigurationError: If the model is needed but not configured.
            ImportTimeoutError: If the import exceeds its time budget.
            ImportExtractionError: If nothing usable could be extracted.
        """
        timeout = self.resolve_timeout(request.timeout)
        handlers: dict[str, Callable[[ImportRequest], Any]] = {
            "text": self._import_text,
            "url": self._import_url,
            "image": self._import_image,
        }
        start = time.perf_counter()
        outcome = "error"
        try:
            async with asyncio.timeout(timeout):
                recipe: ImportedRecipe = await handlers[request.type](request)
        except TimeoutError as e:
            outcome = "timeout"
            logger.warning("Recipe import timed out", source_type=request.type, timeout=timeout)
            msg = f"Import timed out after {timeout:g}s"
            raise ImportTimeoutError(msg) from e
        else:
            outcome = "success"
            logger.info(
                "Recipe imported",
                source_type=request.type,
                title=recipe.title,
                ingredients=len(recipe.ingredients),
            )
            return recipe
        finally:
            record_import(request.type, outcome, time.perf_counter() - start)

    # =========================================================================
    # Source handlers
    # =========================================================================

    async def _import_text(self, request: ImportRequest) -> ImportedRecipe:
        text = self._text_prompt.format(content=request.content, source="text")
        return await self._extract(self._text_prompt, text)

    async def _import_url(self, request: ImportRequest) -> ImportedRecipe:
        url = request.content.strip()
        html: str | None
        try:
            html = await self.fetch_page(url, self._settings.max_html_chars)
        except ImportFetchError as e:
            # The model still gets the URL itself to work with
            logger.warning("Falling back to analyzing the URL text", url=url, error=str(e))
            html = None

        if self.llm_ready:
            text = self._text_prompt.format(content=html or url, source="html")
            try:
                recipe = await self._extract(self._text_prompt, text)
            except ImportExtractionError:
                recipe = self._extract_structured(url, html)
                if recipe is None:
                    raise
                logger.info("Used structured page data after model failure", url=url)
        else:
            recipe = self._extract_structured(url, html)
            if recipe is None:
                raise self._not_ready_error()

        if not recipe.source_url:
            recipe.source_url = url
        return recipe

    async def _import_image(self, request: ImportRequest) -> ImportedRecipe:
        payload, embedded_mime = split_data_url(request.content.strip())
        image = InlineData(
            mime_type=request.mime_type or embedded_mime or DEFAULT_IMAGE_MIME_TYPE,
            data=payload,
        )
        return await self._extract(self._photo_prompt, self._photo_prompt.format(), images=[image])

    # =========================================================================
    # Extraction
    # =========================================================================

    def _not_ready_error(self) -> ImportConfigurationError:
        if self._llm_client is None:
            return ImportConfigurationError("Recipe import model is disabled")
        return ImportConfigurationError(MISSING_KEY_MESSAGE)

    async def _extract(
        self,
        prompt: BasePrompt[ImportedRecipe],
        text: str,
        *,
        images: Sequence[InlineData] = (),
    ) -> ImportedRecipe:
        if not self.llm_ready:
            raise self._not_ready_error()
        assert self._llm_client is not None

        try:
            data = await self._llm_client.generate_json(
                text, images=images, options=prompt.get_options()
            )
        except LLMConfigurationError as e:
            raise ImportConfigurationError(MISSING_KEY_MESSAGE) from e
        except LLMError as e:
            logger.warning("Model extraction failed", error=str(e), error_type=type(e).__name__)
            msg = f"Failed to analyze recipe: {e}"
            raise ImportExtractionError(msg) from e

        return prompt.parse(data)

    def _extract_structured(self, url: str, html: str | None) -> ImportedRecipe | None:
        """Read recipe-scrapers or JSON-LD data from an already fetched page."""
        if not html:
            return None
        recipe = self._extract_with_recipe_scrapers(url, html)
        if recipe is None:
            logger.debug("Falling back to JSON-LD extraction", url=url)
            recipe = extract_recipe_from_jsonld(html, url)
        if recipe is None or not recipe.title:
            return None
        return recipe

    def _extract_with_recipe_scrapers(self, url: str, html: str) -> ImportedRecipe | None:
        try:
            scraper = scrape_html(html, org_url=url)
            title = scraper.title()
        except WebsiteNotImplementedError:
            logger.debug("Site not supported by recipe-scrapers", url=url)
            return None
        except Exception as e:
            # recipe-scrapers raises a range of exceptions for malformed pages
            logger.debug("recipe-scrapers extraction failed", url=url, error=str(e))
            return None

        nutrients = _safe_call(scraper.nutrients) or {}
        # recipe-scrapers joins multiple categories with commas
        category = _safe_call(scraper.category) or ""
        return ImportedRecipe(
            title=title or "",
            recipe_yield=_safe_call(scraper.yields) or "",
            cooking_time=_safe_call(scraper.total_time) or 0,
            calories_per_serving=nutrients.get("calories"),
            ingredients=_safe_call(scraper.ingredients) or [],
            instructions=_safe_call(scraper.instructions_list) or [],
            categories=[name.strip() for name in str(category).split(",") if name.strip()],
            image_url=_safe_call(scraper.image),
            source_url=url,
            notes=_safe_call(scraper.description),
        )

    # =========================================================================
    # Page helpers (also used by the image backfill)
    # =========================================================================

    async def fetch_page(self, url: str, max_chars: int) -> str:
        """Fetch a page's HTML, truncated to ``max_chars`` characters.

        Raises:
            ImportFetchError: On timeouts, connection errors or HTTP errors.
        """
        if self._http_client is None:
            await self.initialize()
        assert self._http_client is not None

        try:
            response = await self._http_client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            msg = f"Request timed out: {url}"
            raise ImportFetchError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP {e.response.status_code} fetching {url}"
            raise ImportFetchError(msg) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            msg = f"Failed to fetch {url}: {e}"
            raise ImportFetchError(msg) from e

        return response.text[:max_chars]

    async def find_image_url(self, html: str, title: str) -> str | None:
        """Ask the model for the main recipe image URL in ``html``.

        Returns:
            The image URL, or None when the model finds none or answers
            with something unreadable.

        Raises:
            ImportConfigurationError: If the model is not configured.
            ImportExtractionError: If the model call fails.
        """
        if not self.llm_ready:
            raise self._not_ready_error()
        assert self._llm_client is not None

        prompt = self._image_lookup_prompt.format(html=html, title=title)
        try:
            result = await self._llm_client.generate_structured(
                prompt,
                ImageLookupResult,
                options=self._image_lookup_prompt.get_options(),
            )
        except LLMValidationError:
            return None
        except LLMError as e:
            msg = f"Image lookup failed: {e}"
            raise ImportExtractionError(msg) from e
        return result.image_url

    async def find_image_for_url(self, url: str, title: str) -> str | None:
        """Fetch ``url`` and look up its main recipe image.

        Raises:
            RecipeImportError: If the page cannot be fetched or the model fails.
        """
        html = await self.fetch_page(url, self._settings.backfill_html_chars)
        return await self.find_image_url(html, title)


def _safe_call(func: Callable[[], Any]) -> Any:
    """Call a scraper accessor, treating any failure as a missing value."""
    try:
        return func()
    except Exception:
        return None


__all__ = [
    "BROWSER_USER_AGENT",
    "MISSING_KEY_MESSAGE",
    "RecipeImportError",
    "RecipeImportService",
    "split_data_url",
]
