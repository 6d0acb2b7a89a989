"""Routes API / API routes."""

from fastapi import APIRouter

from fuelmaster.api import (
    dashboard,
    exports,
    fuel,
    imports,
    vehicle,
)

api_router = APIRouter(prefix="/api")

api_router.include_router(fuel.router, prefix="/fuel", tags=["fuel"])
api_router.include_router(vehicle.router, prefix="/vehicle", tags=["vehicle"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(imports.router, prefix="/imports", tags=["imports"])
api_router.include_router(exports.router, prefix="/exports", tags=["exports"])
