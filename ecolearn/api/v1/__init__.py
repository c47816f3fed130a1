"""
API v1 routes.
"""

from fastapi import APIRouter

from ecolearn.api.v1 import catalog, progression

router = APIRouter()

router.include_router(catalog.router, prefix="/catalog", tags=["Catalog"])
router.include_router(progression.router, tags=["Progression"])
