"""Base schema configuration for all Pydantic models.

Usage:
    - APIRequest: incoming API request bodies (unknown fields ignored)
    - APIResponse: outgoing API response bodies (unknown fields forbidden)
    - StoredDocument: documents persisted in the data file (unknown fields kept)
    - DownstreamResponse: payloads received from external services
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        validate_assignment=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas."""

    model_config = ConfigDict(extra="ignore")


class APIResponse(_BaseSchema):
    """Base class for outgoing API response schemas."""

    model_config = ConfigDict(extra="forbid")


class StoredDocument(_BaseSchema):
    """Base class for documents read from and written back to the data file.

    Unknown fields are kept so a read-modify-write cycle never drops data
    written by other clients.
    """

    model_config = ConfigDict(extra="allow")


class DownstreamResponse(_BaseSchema):
    """Base class for responses received from external services."""

    model_config = ConfigDict(extra="ignore")
