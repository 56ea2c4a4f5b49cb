"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from api.routers.health import router as health_router
from api.routers.auth import router as auth_router
from api.routers.hospitals import router as hospitals_router
from api.routers.donors import router as donors_router
from api.routers.alerts import router as alerts_router
from api.routers.blood_banks import router as blood_banks_router
from api.routers.inventory import router as inventory_router
from api.routers.meta import router as meta_router
from api.routers.views import router as views_router

__all__ = [
    "health_router",
    "auth_router",
    "hospitals_router",
    "donors_router",
    "alerts_router",
    "blood_banks_router",
    "inventory_router",
    "meta_router",
    "views_router",
]
