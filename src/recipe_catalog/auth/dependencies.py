"""FastAPI security dependencies.

The ``Authorization`` header carries ``Bearer <jwt>``. A bare token without
the scheme is accepted as well, since older clients send it that way.
"""

from __future__ import annotations

from typing import Annotated, Final
from uuid import UUID

from fastapi import Depends
from fastapi.security import APIKeyHeader

from recipe_catalog.api.dependencies import get_user_repository
from recipe_catalog.auth.jwt import TokenError, decode_token
from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.core.exceptions import ForbiddenException, UnauthorizedException
from recipe_catalog.database.repositories import UserData, UserRepository
from recipe_catalog.observability.logging import bind_context


BEARER_SCHEME: Final[str] = "bearer"

authorization_header = APIKeyHeader(
    name="Authorization",
    scheme_name="JWT",
    description="JWT access token, optionally prefixed with 'Bearer '",
    auto_error=False,
)


def extract_token(header_value: str | None) -> str | None:
    """Return the token from an ``Authorization`` header value, if any."""
    if header_value is None:
        return None
    value = header_value.strip()
    scheme, _, credentials = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = credentials.strip()
    return value or None


async def get_current_user(
    authorization: Annotated[str | None, Depends(authorization_header)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserData:
    """Resolve the authenticated user.

    Raises:
        UnauthorizedException: 401 "Unauthorized" without a token, and
            401 "Invalid token" when it fails verification or its user no
            longer exists.
    """
    token = extract_token(authorization)
    if token is None:
        raise UnauthorizedException()

    try:
        payload = decode_token(token, settings=settings)
    except TokenError:
        raise UnauthorizedException("Invalid token") from None

    try:
        user_id = UUID(payload.sub)
    except ValueError:
        raise UnauthorizedException("Invalid token") from None

    user = await users.get_by_id(user_id)
    if user is None:
        raise UnauthorizedException("Invalid token")

    bind_context(user_id=str(user.id))
    return user


def ensure_owner(current_user: UserData, user_id: UUID) -> None:
    """Only the account owner may modify an account or its saved recipes.

    Raises:
        ForbiddenException: 403 when ``user_id`` is someone else's.
    """
    if current_user.id != user_id:
        raise ForbiddenException()
