"""Whole-batch validation for spreadsheet imports and bulk edits.

Every row is checked and every problem is reported, so an operator can fix
a spreadsheet in one pass. Validation never touches the database beyond the
read-only lookups performed by the identity resolvers, and it never raises
for a malformed row: problems always end up in ``BatchValidation.errors``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..models import ScheduleStatus, ServiceSource, ServiceType
from .identity import IdentityResolver
from .normalization import (
    normalize_row,
    normalize_service_type,
    normalize_status,
    parse_date,
)

REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("vin", "Chassi"),
    ("model", "Modelo"),
    ("serviceType", "Tipo de serviço"),
    ("client", "Cliente"),
)

# Free-text payload keys copied verbatim onto schedules.
SCHEDULE_TEXT_FIELDS: dict[str, str] = {
    "plate": "plate",
    "model": "model",
    "notes": "notes",
    "provider": "provider",
    "orderNumber": "order_number",
    "createdBy": "created_by",
    "serviceLocation": "service_location",
    "responsibleName": "responsible_name",
    "responsiblePhone": "responsible_phone",
}

SERVICE_TEXT_FIELDS: dict[str, str] = {
    "plate": "plate",
    "model": "model",
    "notes": "notes",
    "provider": "provider",
    "orderNumber": "order_number",
    "createdBy": "created_by",
    "deviceId": "device_id",
    "technician": "technician",
    "installationLocation": "installation_location",
    "serviceAddress": "service_address",
    "protocolNumber": "protocol_number",
    "validationNotes": "validation_notes",
    "secondaryDevice": "secondary_device",
    "validatedBy": "validated_by",
}

_TRUE_VALUES = {"1", "true", "sim", "s", "yes", "y", "x", "on"}
_FALSE_VALUES = {"0", "false", "nao", "não", "n", "no", "off"}


@dataclass
class BatchValidation:
    """Canonical records plus the row-numbered messages for a batch."""

    records: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error_details(self, limit: int) -> list[str]:
        return self.errors[:limit]


def as_text(value: Any) -> Optional[str]:
    """Render a spreadsheet cell as text; ``1.0`` becomes ``"1"``."""

    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text or None


def _parse_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value > 0
    folded = str(value).strip().lower()
    if folded in _TRUE_VALUES:
        return True
    if folded in _FALSE_VALUES:
        return False
    return None


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        raise ValueError("boolean is not a number")
    if isinstance(value, int):
        return value
    number = value if isinstance(value, float) else float(str(value).replace(",", "."))
    if not math.isfinite(number):
        raise ValueError("not a finite number")
    return int(number)


def _copy_text_fields(row: Mapping[str, Any], mapping: Mapping[str, str]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key, attribute in mapping.items():
        text = as_text(row.get(key))
        if text is not None:
            payload[attribute] = text
    return payload


def _iter_rows(rows: Iterable[Any]):
    for index, raw in enumerate(rows, start=1):
        if isinstance(raw, Mapping):
            yield index, normalize_row(raw)
        else:
            yield index, None


def _check_required(index: int, row: Mapping[str, Any], errors: list[str]) -> None:
    for key, label in REQUIRED_FIELDS:
        if as_text(row.get(key)) is None:
            errors.append(f"Linha {index}: {label} obrigatório")


def _resolve(
    index: int,
    raw_value: Any,
    resolver: IdentityResolver,
    label: str,
    errors: list[str],
) -> Optional[str]:
    text = as_text(raw_value)
    if text is None:
        return None
    resolved = resolver.resolve(text)
    if resolved is None:
        errors.append(f'Linha {index}: {label} "{text}" não encontrado')
    return resolved


def _service_type(index: int, raw_value: Any, errors: list[str]) -> Optional[ServiceType]:
    if as_text(raw_value) is None:
        return None
    normalized = normalize_service_type(as_text(raw_value))
    if not normalized.recognized:
        errors.append(f'Linha {index}: Tipo de serviço "{normalized.value}" inválido')
        return None
    return ServiceType(normalized.value)


def _status(index: int, raw_value: Any, errors: list[str]) -> Optional[ScheduleStatus]:
    if as_text(raw_value) is None:
        return None
    normalized = normalize_status(as_text(raw_value))
    if not normalized.recognized:
        errors.append(f'Linha {index}: Status "{normalized.value}" inválido')
        return None
    return ScheduleStatus(normalized.value)


def validate_schedule_rows(
    rows: Sequence[Any],
    *,
    clients: IdentityResolver,
    products: IdentityResolver,
) -> BatchValidation:
    """Validate rows destined for a bulk schedule creation."""

    result = BatchValidation()
    for index, row in _iter_rows(rows):
        if row is None:
            result.errors.append(f"Linha {index}: registro inválido")
            continue

        row_errors: list[str] = []
        _check_required(index, row, row_errors)
        service_type = _service_type(index, row.get("serviceType"), row_errors)
        client_id = _resolve(index, row.get("client"), clients, "Cliente", row_errors)

        product_id = None
        if as_text(row.get("product")) is not None:
            product_id = _resolve(index, row.get("product"), products, "Produto", row_errors)
        elif service_type is ServiceType.INSTALLATION:
            row_errors.append(f"Linha {index}: Produto obrigatório para instalação")

        status = _status(index, row.get("status"), row_errors)

        if row_errors:
            result.errors.extend(row_errors)
            continue

        record = _copy_text_fields(row, SCHEDULE_TEXT_FIELDS)
        record.update(
            {
                "vin": as_text(row.get("vin")),
                "service_type": service_type,
                "client_id": client_id,
                "product_id": product_id,
                "status": status or ScheduleStatus.CRIADO,
                "scheduled_date": parse_date(row.get("scheduledDate")),
            }
        )
        result.records.append(record)
    return result


def validate_schedule_updates(
    rows: Sequence[Any],
    *,
    clients: IdentityResolver,
    products: IdentityResolver,
    existing_vins: set[str],
) -> BatchValidation:
    """Validate rows for a bulk update matched by chassis number.

    Only the fields present in a row end up in its ``changes``; blank cells
    leave the stored value untouched.
    """

    result = BatchValidation()
    for index, row in _iter_rows(rows):
        if row is None:
            result.errors.append(f"Linha {index}: registro inválido")
            continue

        vin = as_text(row.get("vin"))
        if vin is None:
            result.errors.append(f"Linha {index}: Chassi obrigatório")
            continue
        if vin not in existing_vins:
            result.errors.append(
                f"Linha {index}: Agendamento com chassi {vin} não encontrado"
            )
            continue

        row_errors: list[str] = []
        changes = _copy_text_fields(row, SCHEDULE_TEXT_FIELDS)

        status = _status(index, row.get("status"), row_errors)
        if status is not None:
            changes["status"] = status
        service_type = _service_type(index, row.get("serviceType"), row_errors)
        if service_type is not None:
            changes["service_type"] = service_type
        client_id = _resolve(index, row.get("client"), clients, "Cliente", row_errors)
        if client_id is not None:
            changes["client_id"] = client_id
        product_id = _resolve(index, row.get("product"), products, "Produto", row_errors)
        if product_id is not None:
            changes["product_id"] = product_id
        scheduled_date = parse_date(row.get("scheduledDate"))
        if scheduled_date is not None:
            changes["scheduled_date"] = scheduled_date

        if row_errors:
            result.errors.extend(row_errors)
            continue
        result.records.append({"vin": vin, "changes": changes})
    return result


def validate_service_rows(
    rows: Sequence[Any],
    *,
    clients: IdentityResolver,
    products: IdentityResolver,
) -> BatchValidation:
    """Validate rows for a direct import of already completed services."""

    result = BatchValidation()
    for index, row in _iter_rows(rows):
        if row is None:
            result.errors.append(f"Linha {index}: registro inválido")
            continue

        row_errors: list[str] = []
        _check_required(index, row, row_errors)
        service_type = _service_type(index, row.get("serviceType"), row_errors)
        client_id = _resolve(index, row.get("client"), clients, "Cliente", row_errors)
        product_id = _resolve(index, row.get("product"), products, "Produto", row_errors)
        status = _status(index, row.get("status"), row_errors)

        odometer = None
        if row.get("odometer") is not None:
            try:
                odometer = _parse_int(row.get("odometer"))
            except (TypeError, ValueError, OverflowError):
                row_errors.append(f"Linha {index}: Odômetro inválido")

        if row_errors:
            result.errors.extend(row_errors)
            continue

        record = _copy_text_fields(row, SERVICE_TEXT_FIELDS)
        record.update(
            {
                "vin": as_text(row.get("vin")),
                "service_type": service_type,
                "client_id": client_id,
                "product_id": product_id,
                "status": status or ScheduleStatus.CONCLUIDO,
                "scheduled_date": parse_date(row.get("scheduledDate")),
                "odometer": odometer,
                "source": ServiceSource.IMPORT,
            }
        )
        blocking = _parse_bool(row.get("blockingEnabled"))
        if blocking is not None:
            record["blocking_enabled"] = blocking
        validated_at = parse_date(row.get("validatedAt"))
        if validated_at is not None:
            record["validated_at"] = validated_at
        result.records.append(record)
    return result
