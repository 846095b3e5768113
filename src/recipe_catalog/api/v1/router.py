"""API v1 router aggregating all endpoint routers.

All endpoints are mounted under ``api.v1_prefix`` (``/api/v1`` by default).
"""

from __future__ import annotations

from fastapi import APIRouter

from recipe_catalog.api.v1.endpoints import auth, health, recipes, users


router = APIRouter()

router.include_router(health.router)
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(recipes.router)
