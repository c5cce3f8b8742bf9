"""Canonicalise loosely typed spreadsheet values into the schedule vocabulary."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from ..models import ScheduleStatus, ServiceType

EXCEL_EPOCH_OFFSET_DAYS = 25569
_UNIX_EPOCH = datetime(1970, 1, 1)

SERVICE_TYPE_KEYWORDS: tuple[tuple[str, ServiceType], ...] = (
    ("instal", ServiceType.INSTALLATION),
    ("manut", ServiceType.MAINTENANCE),
    ("remo", ServiceType.REMOVAL),
)
STATUS_KEYWORDS: tuple[tuple[str, ScheduleStatus], ...] = (
    ("conclu", ScheduleStatus.CONCLUIDO),
    ("agenda", ScheduleStatus.AGENDADO),
    ("cria", ScheduleStatus.CRIADO),
    ("atrasa", ScheduleStatus.ATRASADO),
    ("cancel", ScheduleStatus.CANCELADO),
)

SERVICE_TYPE_LABELS: dict[str, str] = {
    ServiceType.INSTALLATION.value: "Instalação",
    ServiceType.MAINTENANCE.value: "Manutenção",
    ServiceType.REMOVAL.value: "Remoção",
}
STATUS_LABELS: dict[str, str] = {
    ScheduleStatus.CRIADO.value: "Criado",
    ScheduleStatus.AGENDADO.value: "Agendado",
    ScheduleStatus.CONCLUIDO.value: "Concluído",
    ScheduleStatus.ATRASADO.value: "Atrasado",
    ScheduleStatus.CANCELADO.value: "Cancelado",
}

# Spreadsheet headers (after ``normalise_label``) mapped to the payload keys.
COLUMN_ALIASES: dict[str, str] = {
    "vin": "vin",
    "chassi": "vin",
    "plate": "plate",
    "placa": "plate",
    "model": "model",
    "modelo": "model",
    "client": "client",
    "cliente": "client",
    "product": "product",
    "produto": "product",
    "equipamento": "product",
    "servicetype": "serviceType",
    "service_type": "serviceType",
    "tipo": "serviceType",
    "tipo_de_servico": "serviceType",
    "tipo_servico": "serviceType",
    "status": "status",
    "situacao": "status",
    "scheduleddate": "scheduledDate",
    "scheduled_date": "scheduledDate",
    "data": "scheduledDate",
    "data_agendada": "scheduledDate",
    "data_agendamento": "scheduledDate",
    "notes": "notes",
    "observacoes": "notes",
    "observacao": "notes",
    "provider": "provider",
    "prestador": "provider",
    "ordernumber": "orderNumber",
    "order_number": "orderNumber",
    "pedido": "orderNumber",
    "n_pedido": "orderNumber",
    "no_pedido": "orderNumber",
    "numero_pedido": "orderNumber",
    "createdby": "createdBy",
    "created_by": "createdBy",
    "criado_por": "createdBy",
    "servicelocation": "serviceLocation",
    "service_location": "serviceLocation",
    "local_de_atendimento": "serviceLocation",
    "responsiblename": "responsibleName",
    "responsible_name": "responsibleName",
    "responsavel": "responsibleName",
    "responsiblephone": "responsiblePhone",
    "responsible_phone": "responsiblePhone",
    "telefone_responsavel": "responsiblePhone",
    "deviceid": "deviceId",
    "device_id": "deviceId",
    "id_dispositivo": "deviceId",
    "technician": "technician",
    "tecnico": "technician",
    "installationlocation": "installationLocation",
    "installation_location": "installationLocation",
    "local_de_instalacao": "installationLocation",
    "serviceaddress": "serviceAddress",
    "service_address": "serviceAddress",
    "endereco": "serviceAddress",
    "odometer": "odometer",
    "odometro": "odometer",
    "odometro_km": "odometer",
    "blockingenabled": "blockingEnabled",
    "blocking_enabled": "blockingEnabled",
    "bloqueio": "blockingEnabled",
    "protocolnumber": "protocolNumber",
    "protocol_number": "protocolNumber",
    "protocolo": "protocolNumber",
    "no_protocolo": "protocolNumber",
    "validationnotes": "validationNotes",
    "validation_notes": "validationNotes",
    "secondarydevice": "secondaryDevice",
    "secondary_device": "secondaryDevice",
    "dispositivo_secundario": "secondaryDevice",
    "validatedby": "validatedBy",
    "validated_by": "validatedBy",
    "validado_por": "validatedBy",
    "validatedat": "validatedAt",
    "validated_at": "validatedAt",
    "data_de_validacao": "validatedAt",
}


@dataclass(frozen=True)
class Normalized:
    """Outcome of mapping free text onto a closed vocabulary.

    ``value`` holds the canonical token when ``recognized`` is true and the
    untouched input otherwise, so callers can quote it back in messages.
    """

    recognized: bool
    value: Any


def strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalise_label(value: str) -> str:
    label = strip_accents(value.strip().lower())
    for char in ".º°ª()/-":
        label = label.replace(char, " ")
    return "_".join(label.split())


def _match_keywords(value: Any, keywords) -> Normalized:
    if value is None:
        return Normalized(False, None)
    text = str(value).strip()
    if not text:
        return Normalized(False, None)
    folded = strip_accents(text.lower())
    for keyword, member in keywords:
        if keyword in folded:
            return Normalized(True, member.value)
    return Normalized(False, value)


def normalize_service_type(value: Any) -> Normalized:
    """Map spellings such as ``"Instalação"`` or ``"MANUTENCAO"`` onto a service type."""

    return _match_keywords(value, SERVICE_TYPE_KEYWORDS)


def normalize_status(value: Any) -> Normalized:
    """Map spellings such as ``"Concluído"`` onto a schedule status."""

    return _match_keywords(value, STATUS_KEYWORDS)


def parse_date(value: Any) -> Optional[datetime]:
    """Return a ``datetime`` for the supported input shapes or ``None``.

    Accepted shapes: ``datetime``/``date`` objects, spreadsheet serial numbers
    (1900 date system), ISO 8601 strings and ``DD/MM/YYYY`` strings.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        try:
            milliseconds = (value - EXCEL_EPOCH_OFFSET_DAYS) * 86400 * 1000
            return _UNIX_EPOCH + timedelta(milliseconds=milliseconds)
        except (OverflowError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    parts = raw.split("/")
    if len(parts) == 3:
        try:
            day, month, year = (int(part) for part in parts)
            return datetime(year, month, day)
        except ValueError:
            return None
    return None


def clean_value(value: Any) -> Any:
    """Trim strings and turn blank cells (including NaN) into ``None``."""

    if value is None:
        return None
    if isinstance(value, float) and value != value:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def normalize_row(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Rename spreadsheet headers to payload keys and clean every cell.

    Unknown headers are kept as-is so that nothing the caller sent is lost.
    """

    row: dict[str, Any] = {}
    for key, value in raw.items():
        if key is None:
            continue
        label = normalise_label(str(key))
        canonical = COLUMN_ALIASES.get(label) or COLUMN_ALIASES.get(label.replace("_", ""))
        target = canonical or str(key)
        cleaned = clean_value(value)
        if cleaned is None and row.get(target) is not None:
            continue
        row[target] = cleaned
    return row


def format_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")
