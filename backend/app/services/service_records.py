"""Business logic for completed service records."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session, selectinload

from .. import models, schemas
from ..db_types import is_uuid
from ..models.common import utcnow
from .batch_validation import validate_service_rows
from .bulk_writer import BulkWriteResult, insert_many
from .identity import IdentityResolver, LookupCache
from .schedules import (
    CREATE_DETAILS_LIMIT,
    VALIDATION_ERROR_MESSAGE,
    BatchRejectedError,
    ReferenceNotFoundError,
    ScheduleNotFoundError,
    ensure_batch,
)

LOGGER = logging.getLogger(__name__)

MAX_BULK_SERVICES = 500

# Schedule attributes copied onto the service created from a validation.
_SCHEDULE_FIELDS = (
    "plate",
    "vin",
    "model",
    "scheduled_date",
    "service_type",
    "notes",
    "created_by",
    "client_id",
    "product_id",
    "provider",
    "order_number",
)


class ServiceRecordError(Exception):
    """Base class for service record errors."""


class ServiceRecordNotFoundError(ServiceRecordError):
    """Raised when a service identifier does not match any record."""


class ServiceRecordService:
    """Operations over validated and imported services."""

    @staticmethod
    def _base_query(db: Session):
        return db.query(models.Service).options(
            selectinload(models.Service.client),
            selectinload(models.Service.product),
        )

    @staticmethod
    def list_services(db: Session) -> list[models.Service]:
        return (
            ServiceRecordService._base_query(db)
            .order_by(models.Service.created_at.desc(), models.Service.id.desc())
            .all()
        )

    @staticmethod
    def get_service(db: Session, service_id: str) -> models.Service:
        service = None
        if is_uuid(service_id):
            service = (
                ServiceRecordService._base_query(db)
                .options(selectinload(models.Service.schedule))
                .filter(models.Service.id == service_id)
                .first()
            )
        if service is None:
            raise ServiceRecordNotFoundError("Serviço não encontrado")
        return service

    @staticmethod
    def create_from_validation(
        db: Session, data: schemas.ServiceFromValidationRequest
    ) -> models.Service:
        """Record a validated installation and close its schedule.

        The service and the schedule status change are committed together.
        """

        schedule = db.get(models.Schedule, data.schedule_id) if is_uuid(data.schedule_id) else None
        if schedule is None:
            raise ScheduleNotFoundError("Agendamento não encontrado")

        payload: dict[str, Any] = {
            field: getattr(schedule, field) for field in _SCHEDULE_FIELDS
        }
        validation = data.validation_data.model_dump(exclude_none=True)
        payload.update(validation)
        payload.update(
            {
                "schedule_id": schedule.id,
                "source": models.ServiceSource.VALIDATION,
                "status": models.ScheduleStatus.CONCLUIDO,
                "validated_at": utcnow(),
            }
        )

        service = models.Service(**payload)
        db.add(service)
        db.flush()

        schedule.status = models.ScheduleStatus.CONCLUIDO
        schedule.service_id = service.id
        db.add(schedule)
        db.commit()
        LOGGER.info("Schedule %s validated as service %s", schedule.id, service.id)
        return ServiceRecordService.get_service(db, service.id)

    @staticmethod
    def _resolve_reference(db: Session, model, value: Optional[str], label: str) -> Optional[str]:
        if not value:
            return None
        resolved = IdentityResolver.for_model(db, model, LookupCache()).resolve(value)
        if resolved is None:
            raise ReferenceNotFoundError(f'{label} "{value}" não encontrado')
        return resolved

    @staticmethod
    def create_service(db: Session, data: schemas.ServiceCreate) -> models.Service:
        """Create a service directly, outside the validation workflow."""

        payload = data.model_dump(exclude={"client", "product"})
        payload["client_id"] = ServiceRecordService._resolve_reference(
            db, models.Client, data.client, "Cliente"
        )
        payload["product_id"] = ServiceRecordService._resolve_reference(
            db, models.Product, data.product, "Produto"
        )
        payload["source"] = models.ServiceSource.IMPORT
        payload["validated_at"] = utcnow()

        service = models.Service(**payload)
        db.add(service)
        db.commit()
        return ServiceRecordService.get_service(db, service.id)

    @staticmethod
    def bulk_import(db: Session, rows: Any) -> BulkWriteResult:
        rows = ensure_batch(
            rows,
            limit=MAX_BULK_SERVICES,
            empty_message="Envie um array de serviços",
            limit_message="Limite de 500 serviços por importação",
        )
        cache = LookupCache()
        validation = validate_service_rows(
            rows,
            clients=IdentityResolver.for_model(db, models.Client, cache),
            products=IdentityResolver.for_model(db, models.Product, cache),
        )
        if not validation.ok:
            raise BatchRejectedError(
                VALIDATION_ERROR_MESSAGE, validation.error_details(CREATE_DETAILS_LIMIT)
            )

        imported_at = utcnow()
        records = [{"validated_at": imported_at, **record} for record in validation.records]
        return insert_many(db, models.Service, records)

    @staticmethod
    def update_service(
        db: Session, service_id: str, data: schemas.ServiceUpdate
    ) -> models.Service:
        """Apply a partial update; the schedule link, source and validation time never change."""

        service = ServiceRecordService.get_service(db, service_id)
        updates = data.model_dump(exclude_unset=True)

        client = updates.pop("client", None)
        if client:
            service.client_id = ServiceRecordService._resolve_reference(
                db, models.Client, client, "Cliente"
            )
        if "product" in updates:
            service.product_id = ServiceRecordService._resolve_reference(
                db, models.Product, updates.pop("product"), "Produto"
            )

        for key in ("vin", "model", "service_type", "status", "blocking_enabled"):
            if key in updates and updates[key] is None:
                updates.pop(key)
        for key, value in updates.items():
            setattr(service, key, value)

        db.add(service)
        db.commit()
        db.expire(service)
        return ServiceRecordService.get_service(db, service_id)

    @staticmethod
    def delete_service(db: Session, service_id: str) -> None:
        service = ServiceRecordService.get_service(db, service_id)
        db.delete(service)
        db.commit()
