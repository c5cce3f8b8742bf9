"""Spreadsheet renderings of schedules and services."""

from __future__ import annotations

import io
from typing import Callable, Iterable, List, Sequence, Tuple

import pandas as pd
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.orm import Session, selectinload

from .. import models
from .normalization import SERVICE_TYPE_LABELS, STATUS_LABELS, format_date

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

Column = Tuple[str, int, Callable[[object], object]]


def _label(table: dict[str, str]) -> Callable[[object], str]:
    def render(value: object) -> str:
        if value is None:
            return ""
        token = getattr(value, "value", value)
        return table.get(token, str(token))

    return render


def _text(attribute: str) -> Callable[[object], object]:
    return lambda row: getattr(row, attribute) or ""


def _name(relationship: str) -> Callable[[object], object]:
    def render(row: object) -> object:
        related = getattr(row, relationship)
        return related.name if related is not None else ""

    return render


def _date(attribute: str) -> Callable[[object], object]:
    return lambda row: format_date(getattr(row, attribute))


_service_type = _label(SERVICE_TYPE_LABELS)
_status = _label(STATUS_LABELS)

SCHEDULE_COLUMNS: Sequence[Column] = (
    ("Chassi", 22, _text("vin")),
    ("Placa", 12, _text("plate")),
    ("Modelo", 18, _text("model")),
    ("Cliente", 24, _name("client")),
    ("Equipamento", 22, _name("product")),
    ("Tipo de Serviço", 16, lambda row: _service_type(row.service_type)),
    ("Status", 12, lambda row: _status(row.status)),
    ("Prestador", 20, _text("provider")),
    ("Nº Pedido", 14, _text("order_number")),
    ("Data Agendada", 16, _date("scheduled_date")),
    ("Criado por", 18, _text("created_by")),
    ("Data de Criação", 18, _date("created_at")),
)

SERVICE_COLUMNS: Sequence[Column] = (
    ("Chassi", 22, _text("vin")),
    ("Placa", 12, _text("plate")),
    ("Modelo", 18, _text("model")),
    ("Cliente", 24, _name("client")),
    ("Equipamento", 22, _name("product")),
    ("Tipo de Serviço", 16, lambda row: _service_type(row.service_type)),
    ("ID Dispositivo", 18, _text("device_id")),
    ("Status", 12, lambda row: _status(row.status)),
    ("Técnico", 20, _text("technician")),
    ("Prestador", 20, _text("provider")),
    ("Local de Instalação", 24, _text("installation_location")),
    ("Endereço", 28, _text("service_address")),
    ("Odômetro (km)", 14, lambda row: "" if row.odometer is None else row.odometer),
    ("Bloqueio", 10, lambda row: "Sim" if row.blocking_enabled else "Não"),
    ("Nº Protocolo", 16, _text("protocol_number")),
    ("Dispositivo Secundário", 20, _text("secondary_device")),
    ("Validado por", 18, _text("validated_by")),
    ("Data de Validação", 18, _date("validated_at")),
    ("Criado por", 18, _text("created_by")),
    ("Data de Criação", 18, _date("created_at")),
)

# Import template: header, example value.
SCHEDULE_TEMPLATE_COLUMNS: Sequence[Tuple[str, object]] = (
    ("Chassi", "9BWZZZ377VT004251"),
    ("Placa", "ABC1D23"),
    ("Modelo", "Volvo FH 540"),
    ("Cliente", "Transportes Exemplo"),
    ("Produto", "Rastreador 4G"),
    ("Tipo de Serviço", "Instalação"),
    ("Status", "Criado"),
    ("Data Agendada", "15/01/2025"),
    ("Prestador", "Prestador Exemplo"),
    ("Nº Pedido", "PED-0001"),
    ("Observações", ""),
)

_HEADER_FONT = Font(bold=True, color="FFFFFFFF")
_HEADER_ALIGNMENT = Alignment(horizontal="center")


def _render_workbook(
    sheet_name: str,
    columns: Sequence[Column],
    rows: Iterable[object],
    header_color: str,
) -> bytes:
    headers: List[str] = [header for header, _, _ in columns]
    data = [[render(row) for _, _, render in columns] for row in rows]
    frame = pd.DataFrame(data, columns=headers)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name=sheet_name, index=False)
        sheet = writer.sheets[sheet_name]
        fill = PatternFill(fill_type="solid", fgColor=header_color)
        for cell in sheet[1]:
            cell.font = _HEADER_FONT
            cell.fill = fill
            cell.alignment = _HEADER_ALIGNMENT
        for index, (_, width, _) in enumerate(columns, start=1):
            sheet.column_dimensions[sheet.cell(row=1, column=index).column_letter].width = width
    return buffer.getvalue()


def export_schedules(db: Session) -> bytes:
    """Every schedule, newest first, as an ``.xlsx`` workbook."""

    schedules = (
        db.query(models.Schedule)
        .options(selectinload(models.Schedule.client), selectinload(models.Schedule.product))
        .order_by(models.Schedule.created_at.desc(), models.Schedule.id.desc())
        .all()
    )
    return _render_workbook("Agendamentos", SCHEDULE_COLUMNS, schedules, "FF1890FF")


def export_services(db: Session) -> bytes:
    """Every service, newest first, as an ``.xlsx`` workbook."""

    services = (
        db.query(models.Service)
        .options(selectinload(models.Service.client), selectinload(models.Service.product))
        .order_by(models.Service.created_at.desc(), models.Service.id.desc())
        .all()
    )
    return _render_workbook("Serviços", SERVICE_COLUMNS, services, "FF722ED1")


def build_schedule_import_template() -> bytes:
    """Workbook with the import headers and one example row."""

    headers = [header for header, _ in SCHEDULE_TEMPLATE_COLUMNS]
    frame = pd.DataFrame([[example for _, example in SCHEDULE_TEMPLATE_COLUMNS]], columns=headers)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, sheet_name="Agendamentos", index=False)
        sheet = writer.sheets["Agendamentos"]
        for index, header in enumerate(headers, start=1):
            cell = sheet.cell(row=1, column=index)
            cell.font = Font(bold=True)
            sheet.column_dimensions[cell.column_letter].width = max(14, len(header) + 4)
    return buffer.getvalue()
