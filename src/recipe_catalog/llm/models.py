"""Gemini ``generateContent`` request/response models.

Requests are sent with snake_case field names (accepted by the REST API);
responses arrive camelCase and are read through aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from recipe_catalog.schemas.base import DownstreamResponse


# =============================================================================
# Request Models
# =============================================================================


class InlineData(BaseModel):
    """Base64 encoded binary content, e.g. a photo of a recipe card."""

    mime_type: str = Field(default="image/jpeg", description="MIME type of ``data``")
    data: str = Field(..., description="Base64 payload without a data: URL prefix")


class Part(BaseModel):
    """A single request part: text or inline data."""

    text: str | None = None
    inline_data: InlineData | None = None


class Content(BaseModel):
    """A turn of content made of parts."""

    parts: list[Part] = Field(default_factory=list)


class GenerationConfig(BaseModel):
    """Generation parameters."""

    response_mime_type: str | None = Field(
        default="application/json",
        description="Ask for raw JSON instead of prose",
    )
    temperature: float | None = None
    max_output_tokens: int | None = None


class GenerateContentRequest(BaseModel):
    """Request body for ``models/{model}:generateContent``."""

    contents: list[Content]
    generation_config: GenerationConfig = Field(default_factory=GenerationConfig)
    system_instruction: Content | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body with unset optional values removed."""
        payload = self.model_dump(exclude_none=True)
        payload["generationConfig"] = payload.pop("generation_config")
        return payload


# =============================================================================
# Response Models
# =============================================================================


class ResponsePart(DownstreamResponse):
    """Part of a candidate's content."""

    text: str | None = None


class ResponseContent(DownstreamResponse):
    """Candidate content."""

    parts: list[ResponsePart] = Field(default_factory=list)


class Candidate(DownstreamResponse):
    """One generated candidate."""

    content: ResponseContent | None = None
    finish_reason: str | None = None


class UsageMetadata(DownstreamResponse):
    """Token accounting."""

    prompt_token_count: int | None = None
    candidates_token_count: int | None = None


class GenerateContentResponse(DownstreamResponse):
    """Response from ``models/{model}:generateContent``."""

    candidates: list[Candidate] = Field(default_factory=list)
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None

    @property
    def text(self) -> str | None:
        """Text of the first part of the first candidate, if any."""
        if not self.candidates or self.candidates[0].content is None:
            return None
        parts = self.candidates[0].content.parts
        return parts[0].text if parts else None


class LLMCompletionResult(BaseModel):
    """Internal result from a completion.

    Wraps the cleaned response text with parsed structured output.
    """

    model_config = ConfigDict(frozen=True)

    raw_response: str = Field(..., description="Response text with code fences removed")
    parsed: Any | None = Field(
        default=None,
        description="Parsed structured output if a schema was provided",
    )
    model: str = Field(..., description="Model that generated the response")
    prompt_tokens: int | None = Field(default=None, description="Input token count")
    completion_tokens: int | None = Field(default=None, description="Output token count")
