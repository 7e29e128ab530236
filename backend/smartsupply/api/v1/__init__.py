"""
API v1 router — aggregates all sub-routers.
"""

from fastapi import APIRouter

from smartsupply.api.v1.auth import router as auth_router
from smartsupply.api.v1.warehouses import router as warehouses_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(warehouses_router, prefix="/warehouses", tags=["warehouses"])
