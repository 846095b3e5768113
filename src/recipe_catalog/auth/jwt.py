"""JWT access token handling.

Tokens are HS256-signed with ``JWT_SECRET_KEY`` and carry the user id as the
subject. There are no refresh tokens; clients log in again after expiry.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from pydantic import BaseModel, ValidationError

from recipe_catalog.core.config import get_settings
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from recipe_catalog.core.config import Settings


logger = get_logger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload model."""

    sub: str  # user id
    exp: datetime
    iat: datetime


class TokenError(Exception):
    """Base exception for token-related errors."""


class TokenExpiredError(TokenError):
    """Raised when a token has expired."""


class TokenInvalidError(TokenError):
    """Raised when a token is invalid."""


def access_token_lifetime(settings: Settings | None = None) -> timedelta:
    if settings is None:
        settings = get_settings()
    return timedelta(minutes=settings.auth.jwt.access_token_expire_minutes)


def create_access_token(
    subject: str,
    *,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Create a signed access token for ``subject``.

    Args:
        subject: The user id.
        expires_delta: Custom lifetime. Defaults to the configured expiry.
        settings: Settings to sign with. Defaults to :func:`get_settings`.

    Returns:
        Encoded JWT string.
    """
    if settings is None:
        settings = get_settings()
    if expires_delta is None:
        expires_delta = access_token_lifetime(settings)

    now = datetime.now(UTC)
    payload = {
        "sub": subject,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET_KEY,
        algorithm=settings.auth.jwt.algorithm,
    )


def decode_token(token: str, *, settings: Settings | None = None) -> TokenPayload:
    """Decode and validate a JWT token.

    Raises:
        TokenExpiredError: If the token has expired.
        TokenInvalidError: If the signature, algorithm or claims are invalid.
    """
    if settings is None:
        settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.auth.jwt.algorithm],
        )
        return TokenPayload(**payload)

    except ExpiredSignatureError as e:
        logger.debug("Token expired", error=str(e))
        msg = "Token has expired"
        raise TokenExpiredError(msg) from e

    except (JWTError, ValidationError) as e:
        logger.warning("Invalid token", error=str(e))
        msg = "Invalid token"
        raise TokenInvalidError(msg) from e
