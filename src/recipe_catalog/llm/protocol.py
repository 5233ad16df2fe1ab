"""LLM client protocol.

The import service depends on this interface rather than on the Gemini
client, so tests can substitute a mock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel


if TYPE_CHECKING:
    from collections.abc import Sequence

    from recipe_catalog.llm.models import InlineData, LLMCompletionResult


T = TypeVar("T", bound=BaseModel)


@runtime_checkable
class LLMClientProtocol(Protocol):
    """Interface for generative-model clients."""

    @property
    def is_configured(self) -> bool:
        """Whether the client has what it needs (e.g. an API key) to make calls."""
        ...

    async def initialize(self) -> None:
        """Initialize client resources (HTTP connections, etc.)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def generate(
        self,
        prompt: str,
        *,
        images: Sequence[InlineData] = (),
        system: str | None = None,
        schema: type[T] | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMCompletionResult:
        """Generate a completion, optionally validated against ``schema``.

        Raises:
            LLMConfigurationError: Client is not configured.
            LLMUnavailableError: Service unreachable after retries.
            LLMTimeoutError: Every attempt timed out.
            LLMResponseError: HTTP error status or empty response.
            LLMValidationError: Response doesn't match schema.
        """
        ...

    async def generate_json(
        self,
        prompt: str,
        *,
        images: Sequence[InlineData] = (),
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate a completion and parse it as a JSON object."""
        ...

    async def generate_structured(
        self,
        prompt: str,
        schema: type[T],
        *,
        images: Sequence[InlineData] = (),
        system: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> T:
        """Generate output parsed into ``schema``."""
        ...
