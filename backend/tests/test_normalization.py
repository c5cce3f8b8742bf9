from datetime import date, datetime

import pytest

from backend.app.services.normalization import (
    normalize_row,
    normalize_service_type,
    normalize_status,
    parse_date,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Instalação", "installation"),
        ("INSTALACAO", "installation"),
        ("  instalação ", "installation"),
        ("installation", "installation"),
        ("Manutenção", "maintenance"),
        ("manutencao", "maintenance"),
        ("Remoção", "removal"),
        ("REMOVAL", "removal"),
    ],
)
def test_service_type_spellings_are_canonicalised(raw, expected):
    result = normalize_service_type(raw)
    assert result.recognized is True
    assert result.value == expected


def test_unknown_service_type_is_returned_untouched():
    result = normalize_service_type("Vistoria")
    assert result.recognized is False
    assert result.value == "Vistoria"


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_blank_service_type_is_not_recognised(raw):
    result = normalize_service_type(raw)
    assert result.recognized is False
    assert result.value is None


def test_status_spellings_are_canonicalised():
    assert normalize_status("Concluído").value == "concluido"
    assert normalize_status("AGENDADO").value == "agendado"
    assert normalize_status("cancelado").value == "cancelado"
    assert normalize_status("em análise").recognized is False


def test_parse_date_reads_day_month_year():
    assert parse_date("15/01/2025") == datetime(2025, 1, 15)


def test_parse_date_reads_spreadsheet_serial_numbers():
    # (serial - 25569) days after the Unix epoch.
    assert parse_date(44927) == datetime(2023, 1, 1)
    assert parse_date(45672.5) == datetime(2025, 1, 15, 12, 0)


def test_parse_date_reads_iso_strings_and_date_objects():
    assert parse_date("2025-01-15") == datetime(2025, 1, 15)
    assert parse_date("2025-01-15T10:30:00Z") == datetime(2025, 1, 15, 10, 30)
    assert parse_date(date(2025, 1, 15)) == datetime(2025, 1, 15)


@pytest.mark.parametrize("raw", [None, "", "amanhã", "32/13/2025", True])
def test_parse_date_returns_none_for_garbage(raw):
    assert parse_date(raw) is None


def test_normalize_row_maps_portuguese_headers_and_cleans_cells():
    row = normalize_row(
        {
            "Chassi": " 9BW123 ",
            "Modelo": "FH 540",
            "Tipo de Serviço": "Instalação",
            "Nº Pedido": "PED-1",
            "Observações": "   ",
            "Coluna Extra": "mantida",
            "Odômetro (km)": float("nan"),
        }
    )

    assert row["vin"] == "9BW123"
    assert row["model"] == "FH 540"
    assert row["serviceType"] == "Instalação"
    assert row["orderNumber"] == "PED-1"
    assert row["notes"] is None
    assert row["odometer"] is None
    assert row["Coluna Extra"] == "mantida"


def test_normalize_row_keeps_camel_case_payload_keys():
    row = normalize_row({"vin": "X1", "serviceType": "removal", "scheduledDate": "01/02/2025"})
    assert row == {"vin": "X1", "serviceType": "removal", "scheduledDate": "01/02/2025"}
