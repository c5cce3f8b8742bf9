"""Service layer encapsulating business logic for API routers."""

from .bulk_writer import BulkWriteFailure, BulkWriteResult
from .clients import ClientService
from .products import ProductService
from .reports import ReportFilters, ReportService
from .schedules import (
    BatchRejectedError,
    ReferenceNotFoundError,
    ScheduleNotFoundError,
    ScheduleService,
    ScheduleServiceError,
)
from .service_records import (
    ServiceRecordError,
    ServiceRecordNotFoundError,
    ServiceRecordService,
)
from .uploads import ImageUploadError
from .users import DuplicateEmailError, UserService, UserServiceError

__all__ = [
    "BatchRejectedError",
    "BulkWriteFailure",
    "BulkWriteResult",
    "ClientService",
    "DuplicateEmailError",
    "ImageUploadError",
    "ProductService",
    "ReferenceNotFoundError",
    "ReportFilters",
    "ReportService",
    "ScheduleNotFoundError",
    "ScheduleService",
    "ScheduleServiceError",
    "ServiceRecordError",
    "ServiceRecordNotFoundError",
    "ServiceRecordService",
    "UserService",
    "UserServiceError",
]
