"""Base schema configuration for all Pydantic models.

Usage:
    - APIRequest: For incoming API request bodies
    - APIResponse: For outgoing API response bodies
    - DownstreamResponse: For payloads received from external services
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
        populate_by_name=True,  # Accept both snake_case and camelCase
        use_enum_values=True,
        validate_default=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming API request schemas (extra fields ignored)."""

    model_config = ConfigDict(
        extra="ignore",
    )


class APIResponse(_BaseSchema):
    """Base class for outgoing API response schemas (extra fields forbidden)."""

    model_config = ConfigDict(
        extra="forbid",
    )


class DownstreamResponse(BaseModel):
    """Base class for payloads received from external services.

    Upstream services may add new properties, and we don't want that to
    break our parsing. Field names follow the upstream payload as-is.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )
