"""Pydantic schemas for completed service records."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from ..models import ScheduleStatus, ServiceSource, ServiceType
from .common import CamelModel, EntityRef
from .schedule import FlexibleDate, ServiceTypeInput, StatusInput


class ValidationData(CamelModel):
    """What the field operator reports when confirming an installation."""

    device_id: str = Field(..., min_length=1)
    technician: str = Field(..., min_length=1)
    installation_location: str = Field(..., min_length=1)
    service_address: str = Field(..., min_length=1)
    odometer: Optional[int] = Field(default=None, ge=0)
    blocking_enabled: bool = True
    protocol_number: Optional[str] = None
    validation_notes: Optional[str] = None
    secondary_device: Optional[str] = None
    validated_by: Optional[str] = None
    provider: Optional[str] = None


class ServiceFromValidationRequest(CamelModel):
    schedule_id: str = Field(..., min_length=1)
    validation_data: ValidationData


class ServiceFields(CamelModel):
    plate: Optional[str] = None
    scheduled_date: FlexibleDate = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    provider: Optional[str] = None
    order_number: Optional[str] = None
    device_id: Optional[str] = None
    technician: Optional[str] = None
    installation_location: Optional[str] = None
    service_address: Optional[str] = None
    odometer: Optional[int] = Field(default=None, ge=0)
    protocol_number: Optional[str] = None
    validation_notes: Optional[str] = None
    secondary_device: Optional[str] = None
    validated_by: Optional[str] = None


class ServiceCreate(ServiceFields):
    """Direct creation of a service that did not go through validation."""

    vin: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    service_type: ServiceTypeInput
    client: str = Field(..., min_length=1)
    product: Optional[str] = None
    blocking_enabled: bool = True
    status: StatusInput = ScheduleStatus.CONCLUIDO


class ServiceUpdate(ServiceFields):
    """Partial update. ``schedule``, ``source`` and ``validatedAt`` are ignored."""

    vin: Optional[str] = Field(default=None, min_length=1)
    model: Optional[str] = Field(default=None, min_length=1)
    service_type: Optional[ServiceTypeInput] = None
    client: Optional[str] = None
    product: Optional[str] = None
    blocking_enabled: Optional[bool] = None
    status: Optional[StatusInput] = None


class ServiceRead(ServiceFields):
    id: str
    vin: str
    model: str
    service_type: ServiceType
    status: ScheduleStatus
    blocking_enabled: bool
    validated_at: datetime
    source: ServiceSource
    client_id: Optional[str] = None
    product_id: Optional[str] = None
    schedule_id: Optional[str] = None
    client: Optional[EntityRef] = None
    product: Optional[EntityRef] = None
    created_at: datetime
    updated_at: datetime


class ServiceBulkImportRequest(CamelModel):
    services: Any = None
