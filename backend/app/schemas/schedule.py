"""Pydantic schemas for schedules."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, Field, model_validator

from ..models import ScheduleStatus, ServiceType
from ..services.normalization import normalize_service_type, normalize_status, parse_date
from .common import CamelModel, EntityRef


def _coerce_service_type(value: Any) -> Any:
    if value is None or isinstance(value, ServiceType):
        return value
    normalized = normalize_service_type(value)
    return normalized.value if normalized.recognized else value


def _coerce_status(value: Any) -> Any:
    if value is None or isinstance(value, ScheduleStatus):
        return value
    normalized = normalize_status(value)
    return normalized.value if normalized.recognized else value


def _coerce_date(value: Any) -> Any:
    if value is None or value == "":
        return None
    parsed = parse_date(value)
    return parsed if parsed is not None else value


FlexibleDate = Annotated[Optional[datetime], BeforeValidator(_coerce_date)]
ServiceTypeInput = Annotated[ServiceType, BeforeValidator(_coerce_service_type)]
StatusInput = Annotated[ScheduleStatus, BeforeValidator(_coerce_status)]


class ScheduleFields(CamelModel):
    """Optional attributes shared by every schedule payload."""

    plate: Optional[str] = None
    scheduled_date: FlexibleDate = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    provider: Optional[str] = None
    order_number: Optional[str] = None
    service_location: Optional[str] = None
    responsible_name: Optional[str] = None
    responsible_phone: Optional[str] = None


class ScheduleCreate(ScheduleFields):
    """Schema used when creating a single schedule from the admin form."""

    vin: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    service_type: ServiceTypeInput
    client: str = Field(..., min_length=1, description="Client identifier")
    product: Optional[str] = Field(default=None, description="Product identifier")
    status: StatusInput = ScheduleStatus.CRIADO

    @model_validator(mode="after")
    def _require_product_for_installation(self) -> "ScheduleCreate":
        if self.service_type is ServiceType.INSTALLATION and not self.product:
            raise ValueError("Produto obrigatório para instalação")
        return self


class ScheduleUpdate(ScheduleFields):
    """Partial update; only the keys sent are written."""

    vin: Optional[str] = Field(default=None, min_length=1)
    model: Optional[str] = Field(default=None, min_length=1)
    service_type: Optional[ServiceTypeInput] = None
    client: Optional[str] = None
    product: Optional[str] = None
    status: Optional[StatusInput] = None


class ScheduleStatusUpdate(CamelModel):
    status: StatusInput


class ScheduleRead(ScheduleFields):
    id: str
    vin: str
    model: str
    service_type: ServiceType
    status: ScheduleStatus
    client_id: Optional[str] = None
    product_id: Optional[str] = None
    service_id: Optional[str] = None
    client: Optional[EntityRef] = None
    product: Optional[EntityRef] = None
    created_at: datetime
    updated_at: datetime


class ScheduleBulkRequest(CamelModel):
    """Rows parsed from a spreadsheet or the bulk-edit grid.

    Rows stay loosely typed on purpose: the batch validator reports every
    problem with its row number instead of rejecting the request up front.
    """

    schedules: Any = None
