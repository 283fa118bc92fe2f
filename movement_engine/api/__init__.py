"""
REST API routes for the movement engine.
"""

from fastapi import APIRouter

from movement_engine.api.inspection import router as inspection_router
from movement_engine.api.items import router as items_router
from movement_engine.api.routes import router as routes_router
from movement_engine.api.status import router as status_router
from movement_engine.api.zones import router as zones_router

api_router = APIRouter()

api_router.include_router(zones_router, prefix="/zones", tags=["zones"])
api_router.include_router(items_router, prefix="/items", tags=["items"])
api_router.include_router(inspection_router, prefix="/inspection", tags=["inspection"])
api_router.include_router(routes_router, prefix="/routes", tags=["routes"])
api_router.include_router(status_router, prefix="/status", tags=["status"])

__all__ = ["api_router"]
