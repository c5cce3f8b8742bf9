import os
from contextlib import contextmanager

import pandas as pd

from backend.app import database, models
from backend.app.scripts.import_schedules_from_excel import load_rows, main
from backend.app.services import ScheduleService
from backend.app.services.exports import build_schedule_import_template


def _write_workbook(path, rows):
    pd.DataFrame(rows).to_excel(path, index=False)
    return path


def test_load_rows_turns_blank_cells_into_none(tmp_path):
    workbook = _write_workbook(
        tmp_path / "agenda.xlsx",
        [
            {"Chassi": "9BW1", "Modelo": "FH", "Observações": None},
            {"Chassi": None, "Modelo": None, "Observações": None},
            {"Chassi": "9BW2", "Modelo": "FMX", "Observações": "urgente"},
        ],
    )

    rows = load_rows(workbook)

    assert rows == [
        {"Chassi": "9BW1", "Modelo": "FH", "Observações": None},
        {"Chassi": "9BW2", "Modelo": "FMX", "Observações": "urgente"},
    ]


def test_import_template_rows_create_schedules(tmp_path, db_session):
    db_session.add_all(
        [models.Client(name="Transportes Exemplo"), models.Product(name="Rastreador 4G")]
    )
    db_session.commit()
    workbook = tmp_path / "modelo.xlsx"
    workbook.write_bytes(build_schedule_import_template())

    result = ScheduleService.bulk_create(db_session, load_rows(workbook))

    assert result.count == 1
    schedule = db_session.query(models.Schedule).one()
    assert schedule.vin == "9BWZZZ377VT004251"
    assert schedule.service_type is models.ServiceType.INSTALLATION
    assert schedule.scheduled_date.day == 15
    assert schedule.order_number == "PED-0001"


def test_database_url_flag_overrides_environment(tmp_path, db_session, monkeypatch):
    db_session.add_all(
        [models.Client(name="Transportes Exemplo"), models.Product(name="Rastreador 4G")]
    )
    db_session.commit()
    workbook = tmp_path / "modelo.xlsx"
    workbook.write_bytes(build_schedule_import_template())

    @contextmanager
    def scope():
        yield db_session

    monkeypatch.setattr(database, "session_scope", scope)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///ambiente.db")

    exit_code = main([str(workbook), "--database-url", "sqlite:///argumento.db"])

    assert exit_code == 0
    assert os.environ["DATABASE_URL"] == "sqlite:///argumento.db"
    assert db_session.query(models.Schedule).count() == 1
