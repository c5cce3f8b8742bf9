from datetime import datetime

import pytest

from backend.app import models
from backend.app.services import ReportFilters, ReportService

S = models.ScheduleStatus
T = models.ServiceType


def _schedule(catalog, client, status, service_type=T.MAINTENANCE, provider=None, created_at=None):
    return models.Schedule(
        vin=f"VIN-{status.value}-{service_type.value}-{client}",
        model="X",
        service_type=service_type,
        status=status,
        client_id=catalog[client].id,
        provider=provider,
        created_at=created_at or datetime(2025, 1, 10),
    )


def _service(catalog, client, service_type, created_at, status=S.CONCLUIDO):
    return models.Service(
        vin="VIN",
        model="X",
        service_type=service_type,
        status=status,
        client_id=catalog[client].id,
        validated_at=created_at,
        created_at=created_at,
    )


@pytest.fixture
def report_data(db_session, catalog):
    db_session.add_all(
        [
            _schedule(catalog, "acme", S.CRIADO, T.INSTALLATION, provider="Prestador A"),
            _schedule(catalog, "acme", S.AGENDADO, T.MAINTENANCE, provider="Prestador A"),
            _schedule(catalog, "beta", S.CRIADO, T.REMOVAL, provider="Prestador B"),
            _schedule(catalog, "beta", S.CONCLUIDO, T.INSTALLATION),
            _schedule(catalog, "acme", S.CONCLUIDO, T.REMOVAL, created_at=datetime(2025, 2, 5)),
            _schedule(catalog, "acme", S.CANCELADO),
            _schedule(catalog, "beta", S.ATRASADO),
            _service(catalog, "acme", T.INSTALLATION, datetime(2025, 1, 3, 9)),
            _service(catalog, "acme", T.INSTALLATION, datetime(2025, 1, 3, 15)),
            _service(catalog, "beta", T.REMOVAL, datetime(2025, 2, 1, 8)),
            _service(catalog, "beta", T.MAINTENANCE, datetime(2025, 2, 1, 9), status=S.CANCELADO),
        ]
    )
    db_session.commit()
    return catalog


def test_pending_counts_created_plus_scheduled(db_session, report_data):
    counts = ReportService.schedules_by_status(db_session, ReportFilters())

    assert counts.pendentes == 3
    assert counts.concluidos == 2
    assert counts.cancelados == 1
    assert counts.atrasados == 1


def test_status_counts_are_zero_without_schedules(db_session):
    counts = ReportService.schedules_by_status(db_session, ReportFilters())

    assert counts.model_dump() == {"pendentes": 0, "concluidos": 0, "cancelados": 0, "atrasados": 0}


def test_services_by_type_counts_completed_schedules(db_session, report_data):
    counts = ReportService.services_by_type(db_session, ReportFilters())

    assert (counts.installation, counts.maintenance, counts.removal) == (1, 0, 1)


def test_filters_restrict_window_and_client(db_session, report_data):
    january = ReportFilters.build(
        start_date=datetime(2025, 1, 1), end_date=datetime(2025, 1, 31)
    )
    assert ReportService.services_by_type(db_session, january).removal == 0

    beta_only = ReportFilters.build(client_id=report_data["beta"].id)
    counts = ReportService.schedules_by_status(db_session, beta_only)
    assert (counts.pendentes, counts.concluidos, counts.atrasados) == (1, 1, 1)


def test_invalid_client_filter_is_ignored(caplog):
    filters = ReportFilters.build(client_id="not-a-uuid")

    assert filters.client_id is None
    assert "Ignoring invalid report client filter" in caplog.text


def test_pending_by_client_pivots_service_types(db_session, report_data):
    rows = ReportService.pending_by_client(db_session, ReportFilters())

    assert [row.model_dump() for row in rows] == [
        {"client": "Transportes Acme", "installation": 1, "maintenance": 1, "removal": 0, "total": 2},
        {"client": "Beta Logística", "installation": 0, "maintenance": 0, "removal": 1, "total": 1},
    ]


def test_pending_by_provider(db_session, report_data):
    rows = ReportService.pending_by_provider(db_session, ReportFilters())

    assert [(row.provider, row.pending) for row in rows] == [("Prestador A", 2), ("Prestador B", 1)]


def test_evolution_counts_completed_services_only(db_session, report_data):
    months = ReportService.evolution_by_month(db_session)
    assert [(row.month, row.installation, row.removal, row.total) for row in months] == [
        ("2025-01", 2, 0, 2),
        ("2025-02", 0, 1, 1),
    ]

    days = ReportService.evolution_by_day(db_session)
    assert sorted(days) == ["2025-01", "2025-02"]
    assert [(row.day, row.total) for row in days["2025-01"]] == [("2025-01-03", 2)]


def test_services_by_client(db_session, report_data):
    rows = ReportService.services_by_client(db_session)

    assert [(row.client, row.total) for row in rows] == [
        ("Beta Logística", 2),
        ("Transportes Acme", 2),
    ]


def test_report_daily_window_and_totals(db_session, report_data):
    daily = ReportService.report_daily(
        db_session, datetime(2025, 1, 3), datetime(2025, 1, 3, 23, 59, 59)
    )

    assert [row.client for row in daily.clients] == ["Transportes Acme"]
    assert daily.totals.client == "Total"
    assert daily.totals.installation == 2
    assert daily.totals.total == 2


def test_report_daily_defaults_to_today(db_session, catalog):
    db_session.add(
        models.Service(
            vin="HOJE",
            model="X",
            service_type=T.MAINTENANCE,
            client_id=catalog["acme"].id,
        )
    )
    db_session.commit()

    daily = ReportService.report_daily(db_session)

    assert daily.totals.maintenance == 1
    assert daily.start.date() == daily.end.date()


def test_reports_endpoint_returns_camel_case_bundle(client, report_data):
    response = client.get(
        "/reports",
        params={"startDate": "2025-01-01", "endDate": "31/01/2025", "clientId": "lixo"},
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert set(body) == {
        "servicesByType",
        "schedulesByStatus",
        "pendingByClient",
        "pendingByProvider",
        "evolutionByMonth",
        "evolutionByDay",
        "servicesByClient",
        "reportDaily",
    }
    assert body["servicesByType"] == {"installation": 1, "maintenance": 0, "removal": 0}
    assert body["schedulesByStatus"]["pendentes"] == 3
    assert body["reportDaily"]["totals"]["total"] == 2
