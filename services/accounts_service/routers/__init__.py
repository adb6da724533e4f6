"""Accounts service routers package."""

from services.accounts_service.routers.access import router as access_router
from services.accounts_service.routers.admin import router as admin_router
from services.accounts_service.routers.agreements import router as agreements_router
from services.accounts_service.routers.dashboard import router as dashboard_router
from services.accounts_service.routers.dogs import router as dogs_router
from services.accounts_service.routers.internal import router as internal_router
from services.accounts_service.routers.trainers import router as trainers_router
from services.accounts_service.routers.users import router as users_router

__all__ = [
    "users_router",
    "agreements_router",
    "dogs_router",
    "dashboard_router",
    "trainers_router",
    "access_router",
    "admin_router",
    "internal_router",
]
