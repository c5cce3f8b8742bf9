"""Expose SQLAlchemy models for convenient imports."""

from .client import Client
from .enums import (
    PENDING_STATUSES,
    ScheduleStatus,
    ServiceSource,
    ServiceType,
    UserRole,
)
from .product import Product
from .schedule import Schedule
from .service import Service
from .user import User

__all__ = [
    "Client",
    "Product",
    "Schedule",
    "ScheduleStatus",
    "Service",
    "ServiceSource",
    "ServiceType",
    "PENDING_STATUSES",
    "User",
    "UserRole",
]
