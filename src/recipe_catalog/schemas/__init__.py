"""Request and response schemas."""

from recipe_catalog.schemas.auth import Credentials, TokenResponse
from recipe_catalog.schemas.base import APIRequest, APIResponse, DownstreamResponse
from recipe_catalog.schemas.health import HealthResponse, ReadinessResponse
from recipe_catalog.schemas.recipe import (
    ImageResponse,
    Nutrient,
    RecipeDetail,
    RecipeIngredient,
    RecipeSearchResponse,
    RecipeSummary,
)
from recipe_catalog.schemas.user import UserResponse, UserUpdateRequest


__all__ = [
    "APIRequest",
    "APIResponse",
    "Credentials",
    "DownstreamResponse",
    "HealthResponse",
    "ImageResponse",
    "Nutrient",
    "ReadinessResponse",
    "RecipeDetail",
    "RecipeIngredient",
    "RecipeSearchResponse",
    "RecipeSummary",
    "TokenResponse",
    "UserResponse",
    "UserUpdateRequest",
]
