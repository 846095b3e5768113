"""User account and saved-recipe endpoints.

Every route requires a bearer token. Reads are open to any authenticated
user; changes are restricted to the account owner.
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from recipe_catalog.api.dependencies import get_recipe_repository, get_user_repository
from recipe_catalog.api.v1.endpoints.auth import check_password_length
from recipe_catalog.auth import ensure_owner, get_current_user, hash_password
from recipe_catalog.core.config import Settings, get_settings
from recipe_catalog.core.exceptions import ConflictException, NotFoundException
from recipe_catalog.database.repositories import (
    RecipeRepository,
    UserData,
    UsernameTakenError,
    UserRepository,
)
from recipe_catalog.schemas import RecipeSummary, UserResponse, UserUpdateRequest


router = APIRouter(prefix="/users", tags=["users"])

CurrentUser = Annotated[UserData, Depends(get_current_user)]
Users = Annotated[UserRepository, Depends(get_user_repository)]


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user")
async def get_user(user_id: UUID, _: CurrentUser, users: Users) -> UserResponse:
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundException("User", user_id)
    return UserResponse.from_data(user)


@router.put("/{user_id}", response_model=UserResponse, summary="Update a user")
async def update_user(
    user_id: UUID,
    body: UserUpdateRequest,
    current_user: CurrentUser,
    users: Users,
    settings: Annotated[Settings, Depends(get_settings)],
) -> UserResponse:
    ensure_owner(current_user, user_id)

    password_hash = None
    if body.password is not None:
        check_password_length(body.password, settings)
        password_hash = await run_in_threadpool(
            hash_password, body.password, rounds=settings.auth.bcrypt_rounds
        )

    try:
        user = await users.update(
            user_id, username=body.username, password_hash=password_hash
        )
    except UsernameTakenError as e:
        raise ConflictException(str(e)) from None
    if user is None:
        raise NotFoundException("User", user_id)
    return UserResponse.from_data(user)


@router.delete("/{user_id}", response_model=UserResponse, summary="Delete a user")
async def delete_user(user_id: UUID, current_user: CurrentUser, users: Users) -> UserResponse:
    ensure_owner(current_user, user_id)
    user = await users.delete(user_id)
    if user is None:
        raise NotFoundException("User", user_id)
    return UserResponse.from_data(user)


@router.get(
    "/{user_id}/recipes",
    response_model=list[RecipeSummary],
    summary="List a user's saved recipes",
)
async def list_saved_recipes(
    user_id: UUID, _: CurrentUser, users: Users
) -> list[RecipeSummary]:
    if await users.get_by_id(user_id) is None:
        raise NotFoundException("User", user_id)
    recipes = await users.list_saved_recipes(user_id)
    return [RecipeSummary.from_data(recipe) for recipe in recipes]


@router.put(
    "/{user_id}/recipes/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Save a recipe",
)
async def save_recipe(
    user_id: UUID,
    recipe_id: UUID,
    current_user: CurrentUser,
    users: Users,
    recipes: Annotated[RecipeRepository, Depends(get_recipe_repository)],
) -> Response:
    """Add a recipe to the user's list. Saving it twice is a no-op."""
    ensure_owner(current_user, user_id)
    if await recipes.get_by_id(recipe_id) is None:
        raise NotFoundException("Recipe", recipe_id)
    await users.save_recipe(user_id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}/recipes/{recipe_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove a saved recipe",
)
async def unsave_recipe(
    user_id: UUID,
    recipe_id: UUID,
    current_user: CurrentUser,
    users: Users,
) -> Response:
    ensure_owner(current_user, user_id)
    if not await users.unsave_recipe(user_id, recipe_id):
        raise NotFoundException("Saved recipe", recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
