"""LLM client exceptions.

Raised by the Gemini client and caught by the import service, which either
falls back to structured page data or reports the import as failed.
"""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM client errors."""


class LLMConfigurationError(LLMError):
    """Raised when the client cannot make calls, e.g. no API key is set."""


class LLMUnavailableError(LLMError):
    """Raised when the generative-language API cannot be reached.

    Connection failures are retried before this is raised.
    """


class LLMTimeoutError(LLMUnavailableError):
    """Raised when every attempt timed out."""


class LLMResponseError(LLMError):
    """Raised for HTTP error statuses or a response with no usable text."""


class LLMRateLimitError(LLMResponseError):
    """Raised when the API answers 429."""


class LLMValidationError(LLMError):
    """Raised when the model's text is not the JSON shape that was asked for."""
