"""Dashboard report and spreadsheet export endpoints."""

from __future__ import annotations

import io
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..security import get_current_user
from ..services import ReportFilters, ReportService
from ..services.exports import XLSX_MEDIA_TYPE, export_schedules, export_services
from ..services.normalization import parse_date

router = APIRouter(dependencies=[Depends(get_current_user)])

EXPORTERS = {
    "schedules": export_schedules,
    "services": export_services,
}


@router.get("", response_model=schemas.ReportBundle)
def get_reports(
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
    client_id: Optional[str] = Query(default=None, alias="clientId"),
    db: Session = Depends(get_db),
) -> schemas.ReportBundle:
    """Every dashboard aggregate in a single payload.

    Unparseable dates are treated as absent.
    """

    filters = ReportFilters.build(
        start_date=parse_date(start_date),
        end_date=parse_date(end_date),
        client_id=client_id,
    )
    return ReportService.report_bundle(db, filters)


@router.get("/export")
def export_report(
    report_type: Optional[str] = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
) -> StreamingResponse:
    exporter = EXPORTERS.get(report_type or "")
    if exporter is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tipo inválido. Use 'schedules' ou 'services'",
        )
    return StreamingResponse(
        io.BytesIO(exporter(db)),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={report_type}-report.xlsx"},
    )
