"""HTTP client for the Google Gemini generative-language API.

Uses JSON mode (``response_mime_type: application/json``) so the model answers
with a bare JSON document; Markdown code fences are stripped anyway since
models occasionally add them.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, TypeVar, cast

import httpx
import orjson
from aiolimiter import AsyncLimiter
from pydantic import BaseModel, ValidationError

from recipe_catalog.core.logging import get_logger
from recipe_catalog.llm.exceptions import (
    LLMConfigurationError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from recipe_catalog.llm.models import (
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    LLMCompletionResult,
    Part,
)


if TYPE_CHECKING:
    from collections.abc import Sequence

    from recipe_catalog.llm.models import InlineData


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences around a JSON answer."""
    return _CODE_FENCE.sub("", text).strip()


class GeminiClient:
    """Async HTTP client for Gemini ``generateContent``.

    Attributes:
        base_url: API base URL, e.g. https://generativelanguage.googleapis.com/v1beta.
        model: Model name, e.g. gemini-2.5-flash.
        timeout: HTTP request timeout in seconds.
        max_retries: Retries for connection failures and timeouts.
    """

    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        max_retries: int = 2,
        requests_per_minute: float = 10.0,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: API key; an empty key leaves the client unconfigured.
            model: Model name.
            base_url: API base URL.
            timeout: HTTP request timeout in seconds (default: 60).
            max_retries: Maximum retries for transient failures (default: 2).
            requests_per_minute: Client-side rate limit (default: 10).
        """
        self.api_key = api_key.replace('"', "").strip()
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._http_client: httpx.AsyncClient | None = None
        # One request per (60/rpm) seconds, no initial burst
        self._rate_limiter = AsyncLimiter(1, 60.0 / requests_per_minute)

    @property
    def is_configured(self) -> bool:
        """Whether an API key is present."""
        return bool(self.api_key)

    @property
    def generate_url(self) -> str:
        """The generateContent endpoint for the configured model."""
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def initialize(self) -> None:
        """Initialize the HTTP client with auth headers."""
        if self._http_client is not None:
            return

        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={
                "x-goog-api-key": self.api_key,
                "Content-Type": "application/json",
            },
            limits=httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
            ),
        )
        logger.info(
            "GeminiClient initialized",
            model=self.model,
            timeout=self.timeout,
            configured=self.is_configured,
        )

    async def shutdown(self) -> None:
        """Close the HTTP client and release connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            logger.debug("GeminiClient shutdown")

    async def _execute_with_retry(
        self,
        request: GenerateContentRequest,
    ) -> GenerateContentResponse:
        """Execute request with retry logic for transient failures."""
        if self._http_client is None:
            await self.initialize()

        assert self._http_client is not None

        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            await self._rate_limiter.acquire()

            try:
                response = await self._http_client.post(
                    self.generate_url,
                    json=request.to_payload(),
                )

                if response.status_code == 429:
                    msg = "Gemini rate limit exceeded"
                    raise LLMRateLimitError(msg)

                response.raise_for_status()
                return GenerateContentResponse.model_validate(response.json())

            except httpx.TimeoutException as e:
                last_exception = e
                logger.warning(
                    "Gemini request timeout",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    timeout=self.timeout,
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Gemini timeout after {self.timeout}s"
                raise LLMTimeoutError(msg) from e

            except httpx.HTTPStatusError as e:
                logger.error(
                    "Gemini request failed",
                    status_code=e.response.status_code,
                    body=e.response.text[:500],
                )
                msg = f"Gemini returned {e.response.status_code}"
                raise LLMResponseError(msg) from e

            except httpx.RequestError as e:
                last_exception = e
                logger.warning(
                    "Gemini connection error",
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                    error=str(e),
                )
                if attempt < self.max_retries:
                    continue
                msg = f"Cannot connect to Gemini: {e}"
                raise LLMUnavailableError(msg) from e

            except (ValueError, ValidationError) as e:
                msg = f"Gemini returned an unreadable response: {e}"
                raise LLMResponseError(msg) from e

        msg = "Max retries exceeded"
        raise LLMUnavailableError(msg) from last_exception

    def _build_request(
        self,
        prompt: str,
        images: Sequence[InlineData],
        system: str | None,
        options: dict[str, Any] | None,
    ) -> GenerateContentRequest:
        parts = [Part(text=prompt), *(Part(inline_data=image) for image in images)]
        options = options or {}
        return GenerateContentRequest(
            contents=[Content(parts=parts)],
            generation_config=GenerationConfig(
                temperature=options.get("temperature"),
                max_output_tokens=options.get("max_output_tokens"),
            ),
            system_instruction=Content(parts=[Part(text=system)]) if system else None,
        )

    async def generate(
        self,
        prompt: str,
        *,
        images: Sequence[InlineData] = (),
        system: str | None = None,
        schema: type[T] | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a completion from Gemini.

        Args:
            prompt: Input prompt text.
            images: Inline images sent after the prompt text.
            system: Optional system instruction.
            schema: Optional Pydantic model the JSON answer must match.
            options: ``temperature`` and ``max_output_tokens``.

        Returns:
            LLMCompletionResult with the cleaned text and optionally parsed output.

        Raises:
            LLMConfigurationError: If no API key is configured.
            LLMUnavailableError: If Gemini cannot be reached.
            LLMTimeoutError: If every attempt times out.
            LLMResponseError: If Gemini returns an error or no text.
            LLMValidationError: If the answer doesn't match schema.
        """
        if not self.is_configured:
            msg = "Missing GEMINI_API_KEY"
            raise LLMConfigurationError(msg)

        request = self._build_request(prompt, images, system, options)
        response = await self._execute_with_retry(request)

        text = response.text
        if text is None:
            finish_reason = response.candidates[0].finish_reason if response.candidates else None
            msg = f"Gemini returned no text (finish reason: {finish_reason})"
            raise LLMResponseError(msg)
        raw_response = strip_code_fences(text)

        parsed: Any = None
        if schema is not None:
            try:
                parsed = schema.model_validate_json(raw_response)
            except ValidationError as e:
                logger.warning(
                    "Failed to parse structured Gemini output",
                    schema=schema.__name__,
                    error=str(e),
                    raw_response=raw_response[:500],
                )
                msg = f"Response does not match {schema.__name__} schema: {e}"
                raise LLMValidationError(msg) from e

        usage = response.usage_metadata
        return LLMCompletionResult(
            raw_response=raw_response,
            parsed=parsed,
            model=response.model_version or self.model,
            prompt_tokens=usage.prompt_token_count if usage else None,
            completion_tokens=usage.candidates_token_count if usage else None,
        )

    async def generate_json(
        self,
        prompt: str,
        *,
        images: Sequence[InlineData] = (),
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate a completion and parse it as a JSON object.

        Raises:
            LLMValidationError: If the answer is not a JSON object.
        """
        result = await self.generate(prompt, images=images, system=system, options=options)
        try:
            data = orjson.loads(result.raw_response)
        except orjson.JSONDecodeError as e:
            logger.warning(
                "Gemini answer is not valid JSON",
                raw_response=result.raw_response[:500],
            )
            msg = f"Response is not valid JSON: {e}"
            raise LLMValidationError(msg) from e
        if not isinstance(data, dict):
            msg = f"Expected a JSON object, got {type(data).__name__}"
            raise LLMValidationError(msg)
        return data

    async def generate_structured(
        self,
        prompt: str,
        schema: type[T],
        *,
        images: Sequence[InlineData] = (),
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> T:
        """Generate output parsed into ``schema``.

        Raises:
            LLMValidationError: If response doesn't match schema.
        """
        result = await self.generate(
            prompt,
            images=images,
            system=system,
            schema=schema,
            options=options,
        )

        if result.parsed is None:
            msg = "Structured generation returned no parsed result"
            raise LLMValidationError(msg)

        return cast("T", result.parsed)
