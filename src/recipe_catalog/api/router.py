"""API router aggregating all endpoint routers.

Mounted under the configured API prefix (``/api`` by default).
"""

from __future__ import annotations

from fastapi import APIRouter

from recipe_catalog.api.endpoints import catalog, health, importing, recipes


router = APIRouter()

router.include_router(health.router)
router.include_router(recipes.router)
router.include_router(importing.router)
router.include_router(catalog.router)
