"""Authentication: bcrypt password hashing and JWT bearer tokens."""

from recipe_catalog.auth.dependencies import ensure_owner, get_current_user
from recipe_catalog.auth.jwt import (
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    TokenPayload,
    create_access_token,
    decode_token,
)
from recipe_catalog.auth.passwords import (
    MAX_PASSWORD_BYTES,
    fits_bcrypt,
    hash_password,
    verify_password,
)


__all__ = [
    "MAX_PASSWORD_BYTES",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenPayload",
    "create_access_token",
    "decode_token",
    "ensure_owner",
    "fits_bcrypt",
    "get_current_user",
    "hash_password",
    "verify_password",
]
