from datetime import datetime, timedelta

from backend.app import models
from backend.app.services.bulk_writer import insert_many, update_many_by_key


def _record(catalog, vin, **overrides):
    record = {
        "vin": vin,
        "model": "FH 540",
        "service_type": models.ServiceType.MAINTENANCE,
        "client_id": catalog["acme"].id,
    }
    record.update(overrides)
    return record


def test_insert_many_keeps_rows_committed_around_storage_failures(db_session, catalog):
    records = [
        _record(catalog, "VIN-1"),
        _record(catalog, None),
        _record(catalog, "VIN-3"),
        _record(catalog, "VIN-4", model=None),
        _record(catalog, "VIN-5"),
    ]

    result = insert_many(db_session, models.Schedule, records)

    assert result.count == 3
    assert result.partial
    assert len(result.failed) == 2
    assert result.failed[0].input["vin"] is None
    assert result.failure_messages(1) == [result.failed[0].reason]

    stored = {vin for (vin,) in db_session.query(models.Schedule.vin).all()}
    assert stored == {"VIN-1", "VIN-3", "VIN-5"}


def test_insert_many_rejects_unknown_attributes_per_row(db_session, catalog):
    result = insert_many(
        db_session,
        models.Schedule,
        [_record(catalog, "VIN-1", bogus=True), _record(catalog, "VIN-2")],
    )

    assert result.count == 1
    assert len(result.failed) == 1


def test_update_many_by_key_updates_most_recent_match(db_session, catalog):
    older = models.Schedule(**_record(catalog, "DUP"), created_at=datetime(2024, 1, 1))
    newer = models.Schedule(
        **_record(catalog, "DUP"), created_at=datetime(2024, 1, 1) + timedelta(days=1)
    )
    db_session.add_all([older, newer])
    db_session.commit()

    result = update_many_by_key(
        db_session,
        models.Schedule,
        "vin",
        [
            {"vin": "DUP", "changes": {"status": models.ScheduleStatus.CONCLUIDO}},
            {"vin": "MISSING", "changes": {}},
        ],
    )

    assert result.count == 1
    assert result.failure_messages() == ["Chassi MISSING: registro não encontrado"]
    db_session.expire_all()
    assert db_session.get(models.Schedule, newer.id).status is models.ScheduleStatus.CONCLUIDO
    assert db_session.get(models.Schedule, older.id).status is models.ScheduleStatus.CRIADO
