import pytest

from backend.app.models import ScheduleStatus, ServiceType
from backend.app.services.batch_validation import (
    validate_schedule_rows,
    validate_schedule_updates,
    validate_service_rows,
)
from backend.app.services.identity import IdentityResolver, LookupCache


def _resolver(known: dict[str, str], entity: str) -> IdentityResolver:
    return IdentityResolver(known.get, LookupCache(), entity=entity)


CLIENTS = _resolver({"Acme": "client-1"}, "clients")
PRODUCTS = _resolver({"Rastreador": "product-1"}, "products")


def _row(**overrides):
    row = {
        "vin": "9BW0001",
        "model": "FH 540",
        "serviceType": "Manutenção",
        "client": "Acme",
    }
    row.update(overrides)
    return row


def test_valid_rows_become_canonical_records():
    result = validate_schedule_rows(
        [_row(scheduledDate="15/01/2025", provider="Prestador A", status="Agendado")],
        clients=CLIENTS,
        products=PRODUCTS,
    )

    assert result.ok
    record = result.records[0]
    assert record["vin"] == "9BW0001"
    assert record["service_type"] is ServiceType.MAINTENANCE
    assert record["client_id"] == "client-1"
    assert record["product_id"] is None
    assert record["status"] is ScheduleStatus.AGENDADO
    assert record["provider"] == "Prestador A"
    assert record["scheduled_date"].day == 15


def test_status_defaults_to_created():
    result = validate_schedule_rows([_row()], clients=CLIENTS, products=PRODUCTS)
    assert result.records[0]["status"] is ScheduleStatus.CRIADO


def test_each_missing_required_field_is_reported_with_its_row_number():
    result = validate_schedule_rows(
        [_row(), {"vin": "9BW0002"}],
        clients=CLIENTS,
        products=PRODUCTS,
    )

    assert not result.ok
    assert result.errors == [
        "Linha 2: Modelo obrigatório",
        "Linha 2: Tipo de serviço obrigatório",
        "Linha 2: Cliente obrigatório",
    ]


def test_installation_without_product_adds_one_more_error():
    result = validate_schedule_rows(
        [_row(serviceType="Instalação", model=None)],
        clients=CLIENTS,
        products=PRODUCTS,
    )

    assert result.errors == [
        "Linha 1: Modelo obrigatório",
        "Linha 1: Produto obrigatório para instalação",
    ]


def test_unknown_references_and_vocabulary_are_reported():
    result = validate_schedule_rows(
        [_row(client="Gamma", serviceType="Vistoria", status="Perdido")],
        clients=CLIENTS,
        products=PRODUCTS,
    )

    assert result.errors == [
        'Linha 1: Tipo de serviço "Vistoria" inválido',
        'Linha 1: Cliente "Gamma" não encontrado',
        'Linha 1: Status "Perdido" inválido',
    ]


def test_validator_never_raises_on_malformed_rows():
    result = validate_schedule_rows(
        ["not a row", None, {"vin": 12345.0, "model": 3, "serviceType": 7, "client": []}],
        clients=CLIENTS,
        products=PRODUCTS,
    )

    assert not result.ok
    assert result.errors[0] == "Linha 1: registro inválido"
    assert result.errors[1] == "Linha 2: registro inválido"
    assert any(error.startswith("Linha 3:") for error in result.errors)


def test_portuguese_headers_are_accepted():
    result = validate_schedule_rows(
        [
            {
                "Chassi": "9BW0003",
                "Modelo": "Actros",
                "Tipo de Serviço": "Instalação",
                "Cliente": "Acme",
                "Produto": "Rastreador",
            }
        ],
        clients=CLIENTS,
        products=PRODUCTS,
    )

    assert result.ok
    assert result.records[0]["product_id"] == "product-1"


def test_updates_only_carry_the_fields_present():
    result = validate_schedule_updates(
        [{"vin": "9BW0001", "status": "Concluído"}],
        clients=CLIENTS,
        products=PRODUCTS,
        existing_vins={"9BW0001"},
    )

    assert result.ok
    assert result.records == [{"vin": "9BW0001", "changes": {"status": ScheduleStatus.CONCLUIDO}}]


def test_updates_reject_unknown_chassis():
    result = validate_schedule_updates(
        [{"vin": "9BW0001"}, {"vin": "NOPE"}, {"status": "Agendado"}],
        clients=CLIENTS,
        products=PRODUCTS,
        existing_vins={"9BW0001"},
    )

    assert result.errors == [
        "Linha 2: Agendamento com chassi NOPE não encontrado",
        "Linha 3: Chassi obrigatório",
    ]


def test_service_rows_parse_odometer_and_blocking():
    result = validate_service_rows(
        [_row(odometer="120500", blockingEnabled="Não", deviceId="DEV-1")],
        clients=CLIENTS,
        products=PRODUCTS,
    )

    assert result.ok
    record = result.records[0]
    assert record["odometer"] == 120500
    assert record["blocking_enabled"] is False
    assert record["device_id"] == "DEV-1"
    assert record["status"] is ScheduleStatus.CONCLUIDO


@pytest.mark.parametrize("odometer", ["muito", "inf", "1e999", "nan", float("inf")])
def test_service_rows_report_invalid_odometer(odometer):
    result = validate_service_rows(
        [_row(odometer=odometer)],
        clients=CLIENTS,
        products=PRODUCTS,
    )
    assert result.errors == ["Linha 1: Odômetro inválido"]
