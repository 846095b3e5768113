"""User account schemas."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import Field

from recipe_catalog.schemas.base import APIRequest, APIResponse


if TYPE_CHECKING:
    from recipe_catalog.database.repositories import UserData


class UserUpdateRequest(APIRequest):
    """Partial account update; omitted fields are left unchanged."""

    username: str | None = Field(default=None, min_length=1, max_length=64)
    password: str | None = Field(default=None, min_length=1, max_length=72)


class UserResponse(APIResponse):
    """Public view of a user account (never includes the password hash)."""

    id: UUID
    username: str
    created_at: datetime

    @classmethod
    def from_data(cls, user: UserData) -> UserResponse:
        return cls(id=user.id, username=user.username, created_at=user.created_at)
