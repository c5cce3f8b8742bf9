"""Expose Pydantic schemas for convenient imports."""

from .auth import LoginRequest, TokenResponse
from .client import ClientBase, ClientCreate, ClientRead, ClientUpdate
from .common import (
    BulkOperationResponse,
    CamelModel,
    EntityRef,
    ErrorResponse,
    MessageResponse,
)
from .product import ProductBase, ProductCreate, ProductRead, ProductUpdate
from .report import (
    EvolutionDayRow,
    EvolutionMonthRow,
    PendingByClientRow,
    PendingByProviderRow,
    ReportBundle,
    ReportDaily,
    ReportDailyRow,
    SchedulesByStatus,
    ServicesByClientRow,
    ServicesByType,
)
from .schedule import (
    ScheduleBulkRequest,
    ScheduleCreate,
    ScheduleFields,
    ScheduleRead,
    ScheduleStatusUpdate,
    ScheduleUpdate,
)
from .service import (
    ServiceBulkImportRequest,
    ServiceCreate,
    ServiceFromValidationRequest,
    ServiceRead,
    ServiceUpdate,
    ValidationData,
)
from .user import UserCreate, UserRead, UserUpdate

__all__ = [
    "BulkOperationResponse",
    "CamelModel",
    "ClientBase",
    "ClientCreate",
    "ClientRead",
    "ClientUpdate",
    "EntityRef",
    "ErrorResponse",
    "EvolutionDayRow",
    "EvolutionMonthRow",
    "LoginRequest",
    "MessageResponse",
    "PendingByClientRow",
    "PendingByProviderRow",
    "ProductBase",
    "ProductCreate",
    "ProductRead",
    "ProductUpdate",
    "ReportBundle",
    "ReportDaily",
    "ReportDailyRow",
    "ScheduleBulkRequest",
    "ScheduleCreate",
    "ScheduleFields",
    "ScheduleRead",
    "ScheduleStatusUpdate",
    "ScheduleUpdate",
    "SchedulesByStatus",
    "ServiceBulkImportRequest",
    "ServiceCreate",
    "ServiceFromValidationRequest",
    "ServiceRead",
    "ServiceUpdate",
    "ServicesByClientRow",
    "ServicesByType",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "ValidationData",
]
