"""Password hashing with bcrypt.

bcrypt only looks at the first 72 bytes of a password and current releases
refuse anything longer, so callers check :func:`fits_bcrypt` first.
"""

from __future__ import annotations

from typing import Final

import bcrypt

from recipe_catalog.core.config import get_settings


MAX_PASSWORD_BYTES: Final[int] = 72


def fits_bcrypt(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(password: str, *, rounds: int | None = None) -> str:
    """Hash ``password``.

    Raises:
        ValueError: If the UTF-8 encoding is longer than 72 bytes.
    """
    if not fits_bcrypt(password):
        msg = f"Password is longer than {MAX_PASSWORD_BYTES} bytes"
        raise ValueError(msg)
    if rounds is None:
        rounds = get_settings().auth.bcrypt_rounds
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash.

    Stored hashes only ever come from passwords within the byte limit, so a
    longer candidate cannot match. A malformed stored hash counts as a
    mismatch.
    """
    if not fits_bcrypt(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False
