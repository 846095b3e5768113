"""Authentication schemas for request/response validation."""

from __future__ import annotations

from pydantic import Field

from recipe_catalog.schemas.base import APIRequest, APIResponse


class Credentials(APIRequest):
    """Username and password, used by both register and login."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Unique username",
        examples=["alice"],
    )
    # bcrypt limit; the byte length is checked again at the endpoint.
    password: str = Field(..., min_length=1, max_length=72, description="Password")


class TokenResponse(APIResponse):
    """Token response for successful authentication."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Access token expiration in seconds")
