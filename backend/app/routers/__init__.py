"""Routers package."""

from .auth import router as auth_router
from .clients import router as clients_router
from .products import router as products_router
from .reports import router as reports_router
from .schedules import router as schedules_router
from .services import router as services_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "clients_router",
    "products_router",
    "reports_router",
    "schedules_router",
    "services_router",
    "users_router",
]
