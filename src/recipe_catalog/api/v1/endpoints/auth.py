"""Registration, login and current-user endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from recipe_catalog.api.dependencies import get_user_repository
from recipe_catalog.auth import (
    MAX_PASSWORD_BYTES,
    create_access_token,
    fits_bcrypt,
    get_current_user,
    hash_password,
    verify_password,
)
from recipe_catalog.auth.jwt import access_token_lifetime
from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.core.exceptions import (
    ConflictException,
    InvalidInputException,
    UnauthorizedException,
)
from recipe_catalog.database.repositories import (
    UserData,
    UsernameTakenError,
    UserRepository,
)
from recipe_catalog.observability.logging import get_logger
from recipe_catalog.schemas import Credentials, TokenResponse, UserResponse


logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def check_password_length(password: str, settings: Settings) -> None:
    """Reject passwords shorter than ``auth.min_password_length`` or too long for bcrypt."""
    minimum = settings.auth.min_password_length
    if len(password) < minimum:
        raise InvalidInputException(f"Password must be at least {minimum} characters")
    if not fits_bcrypt(password):
        raise InvalidInputException(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
        )


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={status.HTTP_409_CONFLICT: {"description": "Username already taken"}},
)
async def register(
    body: Credentials,
    users: Annotated[UserRepository, Depends(get_user_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    check_password_length(body.password, settings)
    password_hash = await run_in_threadpool(
        hash_password, body.password, rounds=settings.auth.bcrypt_rounds
    )
    try:
        user = await users.create(body.username, password_hash)
    except UsernameTakenError as e:
        raise ConflictException(str(e)) from None
    return UserResponse.from_data(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange credentials for an access token",
    responses={status.HTTP_401_UNAUTHORIZED: {"description": "Bad credentials"}},
)
async def login(
    body: Credentials,
    users: Annotated[UserRepository, Depends(get_user_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenResponse:
    """Verify the password and issue a bearer token.

    Unknown usernames and wrong passwords get the same 401 response.
    """
    user = await users.get_by_username(body.username)
    if user is None or not await run_in_threadpool(
        verify_password, body.password, user.password_hash
    ):
        logger.info("Login rejected", username=body.username)
        raise UnauthorizedException("Invalid username or password")

    lifetime = access_token_lifetime(settings)
    return TokenResponse(
        access_token=create_access_token(
            str(user.id), expires_delta=lifetime, settings=settings
        ),
        token_type="bearer",
        expires_in=int(lifetime.total_seconds()),
    )


@router.get("/me", response_model=UserResponse, summary="Current user")
async def me(
    current_user: Annotated[UserData, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse.from_data(current_user)
