"""Generative-model client used by the import gateway."""

from recipe_catalog.llm.client import GeminiClient, strip_code_fences
from recipe_catalog.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTimeoutError,
    LLMUnavailableError,
    LLMValidationError,
)
from recipe_catalog.llm.models import InlineData, LLMCompletionResult
from recipe_catalog.llm.protocol import LLMClientProtocol


__all__ = [
    "GeminiClient",
    "InlineData",
    "LLMClientProtocol",
    "LLMCompletionResult",
    "LLMConfigurationError",
    "LLMError",
    "LLMRateLimitError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMUnavailableError",
    "LLMValidationError",
    "strip_code_fences",
]
