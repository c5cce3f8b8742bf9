"""Business logic for schedules, including spreadsheet-driven bulk operations."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy import nulls_last
from sqlalchemy.orm import Session, selectinload

from .. import models, schemas
from ..db_types import is_uuid
from .batch_validation import as_text, validate_schedule_rows, validate_schedule_updates
from .bulk_writer import BulkWriteResult, insert_many, update_many_by_key
from .identity import IdentityResolver, LookupCache
from .normalization import normalize_row

LOGGER = logging.getLogger(__name__)

MAX_BULK_SCHEDULES = 1000
CREATE_DETAILS_LIMIT = 10
UPDATE_DETAILS_LIMIT = 20
PARTIAL_ERRORS_LIMIT = 10
VALIDATION_ERROR_MESSAGE = "Erros de validação"


class ScheduleServiceError(Exception):
    """Base class for schedule related errors."""


class ScheduleNotFoundError(ScheduleServiceError):
    """Raised when a schedule identifier does not match any record."""


class ReferenceNotFoundError(ScheduleServiceError):
    """Raised when a referenced client or product does not exist."""


class BatchRejectedError(ScheduleServiceError):
    """Raised when a batch is refused before anything is written."""

    def __init__(self, message: str, details: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


def ensure_batch(rows: Any, *, limit: int, empty_message: str, limit_message: str) -> list:
    """Return ``rows`` as a list or reject the request shape."""

    if not isinstance(rows, list) or not rows:
        raise BatchRejectedError(empty_message)
    if len(rows) > limit:
        raise BatchRejectedError(limit_message)
    return rows


def _resolvers(db: Session) -> tuple[IdentityResolver, IdentityResolver]:
    cache = LookupCache()
    return (
        IdentityResolver.for_model(db, models.Client, cache),
        IdentityResolver.for_model(db, models.Product, cache),
    )


class ScheduleService:
    """Encapsulates CRUD and bulk operations for schedules."""

    @staticmethod
    def _base_query(db: Session):
        return db.query(models.Schedule).options(
            selectinload(models.Schedule.client),
            selectinload(models.Schedule.product),
        )

    @staticmethod
    def list_schedules(db: Session) -> list[models.Schedule]:
        return (
            ScheduleService._base_query(db)
            .order_by(
                nulls_last(models.Schedule.scheduled_date.asc()),
                models.Schedule.created_at.asc(),
            )
            .all()
        )

    @staticmethod
    def get_schedule(db: Session, schedule_id: str) -> models.Schedule:
        schedule = None
        if is_uuid(schedule_id):
            schedule = (
                ScheduleService._base_query(db)
                .filter(models.Schedule.id == schedule_id)
                .first()
            )
        if schedule is None:
            raise ScheduleNotFoundError("Agendamento não encontrado")
        return schedule

    @staticmethod
    def _require_reference(db: Session, model, value: str, label: str) -> str:
        entity = db.get(model, value) if is_uuid(value) else None
        if entity is None:
            raise ReferenceNotFoundError(f"{label} não encontrado")
        return entity.id

    @staticmethod
    def create_schedule(db: Session, data: schemas.ScheduleCreate) -> models.Schedule:
        payload = data.model_dump(exclude={"client", "product"})
        payload["client_id"] = ScheduleService._require_reference(
            db, models.Client, data.client, "Cliente"
        )
        if data.product:
            payload["product_id"] = ScheduleService._require_reference(
                db, models.Product, data.product, "Produto"
            )
        schedule = models.Schedule(**payload)
        db.add(schedule)
        db.commit()
        return ScheduleService.get_schedule(db, schedule.id)

    @staticmethod
    def update_schedule(
        db: Session, schedule_id: str, data: schemas.ScheduleUpdate
    ) -> models.Schedule:
        schedule = ScheduleService.get_schedule(db, schedule_id)
        updates = data.model_dump(exclude_unset=True)

        client = updates.pop("client", None)
        if client:
            schedule.client_id = ScheduleService._require_reference(
                db, models.Client, client, "Cliente"
            )
        if "product" in updates:
            product = updates.pop("product")
            schedule.product_id = (
                ScheduleService._require_reference(db, models.Product, product, "Produto")
                if product
                else None
            )

        for key in ("vin", "model", "service_type", "status"):
            if key in updates and updates[key] is None:
                updates.pop(key)
        for key, value in updates.items():
            setattr(schedule, key, value)

        db.add(schedule)
        db.commit()
        db.expire(schedule)
        return ScheduleService.get_schedule(db, schedule_id)

    @staticmethod
    def update_status(
        db: Session, schedule_id: str, status: models.ScheduleStatus
    ) -> models.Schedule:
        schedule = ScheduleService.get_schedule(db, schedule_id)
        schedule.status = status
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete_schedule(db: Session, schedule_id: str) -> None:
        schedule = ScheduleService.get_schedule(db, schedule_id)
        db.delete(schedule)
        db.commit()

    @staticmethod
    def bulk_create(db: Session, rows: Any) -> BulkWriteResult:
        """Validate the whole batch and insert it row by row.

        Raises ``BatchRejectedError`` with up to ten messages when any row
        is invalid; nothing is written in that case.
        """

        rows = ensure_batch(
            rows,
            limit=MAX_BULK_SCHEDULES,
            empty_message="Envie um array de agendamentos",
            limit_message="Limite de 1000 agendamentos por importação",
        )
        clients, products = _resolvers(db)
        validation = validate_schedule_rows(rows, clients=clients, products=products)
        if not validation.ok:
            LOGGER.info(
                "Rejected bulk schedule creation: %d problem(s) in %d row(s)",
                len(validation.errors),
                len(rows),
            )
            raise BatchRejectedError(
                VALIDATION_ERROR_MESSAGE, validation.error_details(CREATE_DETAILS_LIMIT)
            )
        return insert_many(db, models.Schedule, validation.records)

    @staticmethod
    def _existing_vins(db: Session, rows: list) -> set[str]:
        candidates = {
            vin
            for vin in (
                as_text(normalize_row(row).get("vin"))
                for row in rows
                if isinstance(row, Mapping)
            )
            if vin is not None
        }
        if not candidates:
            return set()
        found = (
            db.query(models.Schedule.vin)
            .filter(models.Schedule.vin.in_(candidates))
            .distinct()
            .all()
        )
        return {vin for (vin,) in found}

    @staticmethod
    def bulk_update(db: Session, rows: Any) -> BulkWriteResult:
        """Update schedules matched by chassis number.

        Raises ``BatchRejectedError`` with up to twenty messages when a row
        is invalid or names an unknown chassis.
        """

        rows = ensure_batch(
            rows,
            limit=MAX_BULK_SCHEDULES,
            empty_message="Envie um array de agendamentos",
            limit_message="Limite de 1000 agendamentos por operação",
        )
        clients, products = _resolvers(db)
        validation = validate_schedule_updates(
            rows,
            clients=clients,
            products=products,
            existing_vins=ScheduleService._existing_vins(db, rows),
        )
        if not validation.ok:
            LOGGER.info(
                "Rejected bulk schedule update: %d problem(s) in %d row(s)",
                len(validation.errors),
                len(rows),
            )
            raise BatchRejectedError(
                VALIDATION_ERROR_MESSAGE, validation.error_details(UPDATE_DETAILS_LIMIT)
            )
        return update_many_by_key(db, models.Schedule, "vin", validation.records)
