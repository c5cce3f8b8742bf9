"""Routes for completed service records."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..security import get_current_user, require_roles
from ..services import (
    BatchRejectedError,
    ReferenceNotFoundError,
    ScheduleNotFoundError,
    ServiceRecordNotFoundError,
    ServiceRecordService,
)
from ..services.schedules import PARTIAL_ERRORS_LIMIT

LOGGER = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

require_validation = require_roles(models.UserRole.VALIDATION)


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("", response_model=list[schemas.ServiceRead])
def list_services(db: Session = Depends(get_db)) -> list[models.Service]:
    """Return services, newest first."""
    return ServiceRecordService.list_services(db)


@router.post(
    "",
    response_model=schemas.ServiceRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_validation)],
)
def create_service(
    service_in: schemas.ServiceCreate, db: Session = Depends(get_db)
) -> models.Service:
    try:
        return ServiceRecordService.create_service(db, service_in)
    except ReferenceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post(
    "/from-validation",
    response_model=schemas.ServiceRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_validation)],
)
def create_service_from_validation(
    payload: schemas.ServiceFromValidationRequest, db: Session = Depends(get_db)
) -> models.Service:
    """Create the service for a validated installation and close the schedule."""

    try:
        return ServiceRecordService.create_from_validation(db, payload)
    except ScheduleNotFoundError as exc:
        raise _not_found(exc) from exc


@router.post(
    "/bulk-import",
    response_model=schemas.BulkOperationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": schemas.ErrorResponse}, 207: {"model": schemas.BulkOperationResponse}},
    dependencies=[Depends(require_validation)],
)
def bulk_import_services(
    payload: schemas.ServiceBulkImportRequest, db: Session = Depends(get_db)
) -> JSONResponse:
    try:
        result = ServiceRecordService.bulk_import(db, payload.services)
    except BatchRejectedError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=schemas.ErrorResponse(error=exc.message, details=exc.details).model_dump(),
        )

    message = f"{result.count} serviço(s) importado(s)"
    errors = None
    status_code = status.HTTP_201_CREATED
    if result.partial:
        message = f"{message}, {len(result.failed)} falharam"
        errors = result.failure_messages(PARTIAL_ERRORS_LIMIT)
        status_code = status.HTTP_207_MULTI_STATUS
    body = schemas.BulkOperationResponse(count=result.count, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("/{service_id}", response_model=schemas.ServiceRead)
def get_service(service_id: str, db: Session = Depends(get_db)) -> models.Service:
    try:
        return ServiceRecordService.get_service(db, service_id)
    except ServiceRecordNotFoundError as exc:
        raise _not_found(exc) from exc


@router.put(
    "/{service_id}",
    response_model=schemas.ServiceRead,
    dependencies=[Depends(require_validation)],
)
def update_service(
    service_id: str,
    service_in: schemas.ServiceUpdate,
    db: Session = Depends(get_db),
) -> models.Service:
    try:
        return ServiceRecordService.update_service(db, service_id, service_in)
    except ServiceRecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except ReferenceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.delete(
    "/{service_id}",
    response_model=schemas.MessageResponse,
    dependencies=[Depends(require_validation)],
)
def delete_service(service_id: str, db: Session = Depends(get_db)) -> schemas.MessageResponse:
    try:
        ServiceRecordService.delete_service(db, service_id)
    except ServiceRecordNotFoundError as exc:
        raise _not_found(exc) from exc
    return schemas.MessageResponse(message="Serviço removido com sucesso")
