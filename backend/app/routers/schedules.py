"""Routes for schedules, including spreadsheet bulk create and update."""

from __future__ import annotations

import io
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..security import get_current_user, require_roles
from ..services import (
    BatchRejectedError,
    BulkWriteResult,
    ReferenceNotFoundError,
    ScheduleNotFoundError,
    ScheduleService,
)
from ..services.exports import XLSX_MEDIA_TYPE, build_schedule_import_template
from ..services.schedules import PARTIAL_ERRORS_LIMIT

LOGGER = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

require_scheduling = require_roles(models.UserRole.SCHEDULING)


def _rejected(exc: BatchRejectedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=schemas.ErrorResponse(error=exc.message, details=exc.details).model_dump(),
    )


def _bulk_response(result: BulkWriteResult, verb: str, success_code: int) -> JSONResponse:
    message = f"{result.count} agendamento(s) {verb} com sucesso"
    errors = None
    status_code = success_code
    if result.partial:
        LOGGER.warning(
            "Bulk schedule operation stored %d row(s), %d failed",
            result.count,
            len(result.failed),
        )
        message = f"{message}, {len(result.failed)} falharam"
        errors = result.failure_messages(PARTIAL_ERRORS_LIMIT)
        status_code = status.HTTP_207_MULTI_STATUS
    else:
        LOGGER.info("Bulk schedule operation stored %d row(s)", result.count)
    body = schemas.BulkOperationResponse(count=result.count, message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@router.get("", response_model=list[schemas.ScheduleRead])
def list_schedules(db: Session = Depends(get_db)) -> list[models.Schedule]:
    """Return schedules ordered by scheduled date; undated ones last."""
    return ScheduleService.list_schedules(db)


@router.get("/import/template")
def download_import_template() -> StreamingResponse:
    """Blank import workbook with one example row."""

    return StreamingResponse(
        io.BytesIO(build_schedule_import_template()),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=modelo-agendamentos.xlsx"},
    )


@router.post(
    "/bulk",
    response_model=schemas.BulkOperationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": schemas.ErrorResponse}, 207: {"model": schemas.BulkOperationResponse}},
    dependencies=[Depends(require_scheduling)],
)
def bulk_create_schedules(
    payload: schemas.ScheduleBulkRequest, db: Session = Depends(get_db)
) -> JSONResponse:
    """Create schedules from spreadsheet rows; any invalid row rejects the batch."""

    try:
        result = ScheduleService.bulk_create(db, payload.schedules)
    except BatchRejectedError as exc:
        return _rejected(exc)
    return _bulk_response(result, "criado(s)", status.HTTP_201_CREATED)


@router.put(
    "/bulk",
    response_model=schemas.BulkOperationResponse,
    responses={400: {"model": schemas.ErrorResponse}, 207: {"model": schemas.BulkOperationResponse}},
    dependencies=[Depends(require_scheduling)],
)
def bulk_update_schedules(
    payload: schemas.ScheduleBulkRequest, db: Session = Depends(get_db)
) -> JSONResponse:
    """Update schedules matched by chassis number."""

    try:
        result = ScheduleService.bulk_update(db, payload.schedules)
    except BatchRejectedError as exc:
        return _rejected(exc)
    return _bulk_response(result, "modificado(s)", status.HTTP_200_OK)


@router.get("/{schedule_id}", response_model=schemas.ScheduleRead)
def get_schedule(schedule_id: str, db: Session = Depends(get_db)) -> models.Schedule:
    try:
        return ScheduleService.get_schedule(db, schedule_id)
    except ScheduleNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post(
    "",
    response_model=schemas.ScheduleRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_scheduling)],
)
def create_schedule(
    schedule_in: schemas.ScheduleCreate, db: Session = Depends(get_db)
) -> models.Schedule:
    try:
        return ScheduleService.create_schedule(db, schedule_in)
    except ReferenceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.put(
    "/{schedule_id}",
    response_model=schemas.ScheduleRead,
    dependencies=[Depends(require_scheduling)],
)
def update_schedule(
    schedule_id: str,
    schedule_in: schemas.ScheduleUpdate,
    db: Session = Depends(get_db),
) -> models.Schedule:
    try:
        return ScheduleService.update_schedule(db, schedule_id, schedule_in)
    except ScheduleNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ReferenceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.patch(
    "/{schedule_id}/status",
    response_model=schemas.ScheduleRead,
    dependencies=[Depends(require_scheduling)],
)
def update_schedule_status(
    schedule_id: str,
    payload: schemas.ScheduleStatusUpdate,
    db: Session = Depends(get_db),
) -> models.Schedule:
    try:
        return ScheduleService.update_status(db, schedule_id, payload.status)
    except ScheduleNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.delete(
    "/{schedule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_scheduling)],
)
def delete_schedule(schedule_id: str, db: Session = Depends(get_db)) -> None:
    try:
        ScheduleService.delete_schedule(db, schedule_id)
    except ScheduleNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
