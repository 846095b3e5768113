"""Unit tests for JWT token handling.

Tests cover:
- Token creation
- Token decoding and validation
- Token expiration
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time
from jose import jwt

from recipe_catalog.auth.jwt import (
    TokenExpiredError,
    TokenInvalidError,
    access_token_lifetime,
    create_access_token,
    decode_token,
)
from recipe_catalog.core.config import Settings


pytestmark = pytest.mark.unit


# =============================================================================
# Token Creation Tests
# =============================================================================


class TestCreateAccessToken:
    """Tests for create_access_token."""

    def test_token_contains_subject(self, test_settings: Settings) -> None:
        token = create_access_token("user-123", settings=test_settings)

        payload = decode_token(token, settings=test_settings)
        assert payload.sub == "user-123"

    @freeze_time("2024-01-01 12:00:00", tz_offset=0)
    def test_uses_configured_lifetime(self, test_settings: Settings) -> None:
        token = create_access_token("user-123", settings=test_settings)

        payload = decode_token(token, settings=test_settings)
        assert payload.iat == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        assert payload.exp - payload.iat == timedelta(minutes=1440)

    def test_lifetime_from_settings(self, test_settings: Settings) -> None:
        assert access_token_lifetime(test_settings) == timedelta(days=1)

    @freeze_time("2024-01-01 12:00:00", tz_offset=0)
    def test_custom_expiry(self, test_settings: Settings) -> None:
        token = create_access_token(
            "user-123",
            expires_delta=timedelta(minutes=5),
            settings=test_settings,
        )

        payload = decode_token(token, settings=test_settings)
        assert payload.exp == datetime(2024, 1, 1, 12, 5, tzinfo=UTC)


# =============================================================================
# Token Decoding Tests
# =============================================================================


class TestDecodeToken:
    """Tests for decode_token."""

    def test_expired_token(self, test_settings: Settings) -> None:
        with freeze_time("2024-01-01 12:00:00"):
            token = create_access_token(
                "user-123",
                expires_delta=timedelta(minutes=30),
                settings=test_settings,
            )

        with freeze_time("2024-01-01 13:00:00"), pytest.raises(TokenExpiredError):
            decode_token(token, settings=test_settings)

    def test_wrong_secret(self, test_settings: Settings) -> None:
        token = jwt.encode(
            {
                "sub": "user-123",
                "exp": datetime.now(UTC) + timedelta(minutes=5),
                "iat": datetime.now(UTC),
            },
            "another-secret-key-minimum-32-characters",
            algorithm="HS256",
        )

        with pytest.raises(TokenInvalidError):
            decode_token(token, settings=test_settings)

    def test_garbage_token(self, test_settings: Settings) -> None:
        with pytest.raises(TokenInvalidError):
            decode_token("not-a-jwt", settings=test_settings)

    def test_missing_subject(self, test_settings: Settings) -> None:
        token = jwt.encode(
            {"exp": datetime.now(UTC) + timedelta(minutes=5), "iat": datetime.now(UTC)},
            test_settings.JWT_SECRET_KEY,
            algorithm="HS256",
        )

        with pytest.raises(TokenInvalidError):
            decode_token(token, settings=test_settings)
