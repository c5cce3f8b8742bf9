"""Aggregates backing the dashboard report views."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, time
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from .. import models, schemas
from ..db_types import is_uuid
from ..models.common import utcnow

LOGGER = logging.getLogger(__name__)

SERVICE_TYPE_KEYS = tuple(member.value for member in models.ServiceType)


@dataclass(frozen=True)
class ReportFilters:
    """Optional window on ``created_at`` plus a client restriction."""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    client_id: Optional[str] = None

    @classmethod
    def build(
        cls,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        client_id: Optional[str] = None,
    ) -> "ReportFilters":
        """Drop a client id that cannot identify any client."""

        cleaned = client_id.strip() if client_id else None
        if cleaned and not is_uuid(cleaned):
            LOGGER.warning("Ignoring invalid report client filter %r", client_id)
            cleaned = None
        return cls(start_date=start_date, end_date=end_date, client_id=cleaned or None)


def _type_key(service_type) -> str:
    return models.ServiceType(service_type).value


def _empty_counts() -> Dict[str, int]:
    return {key: 0 for key in SERVICE_TYPE_KEYS}


def _with_total(counts: Dict[str, int]) -> Dict[str, int]:
    return {**counts, "total": sum(counts[key] for key in SERVICE_TYPE_KEYS)}


class ReportService:
    """Read-only aggregates over schedules and services."""

    @staticmethod
    def _apply_filters(query: Query, model, filters: ReportFilters) -> Query:
        if filters.start_date is not None:
            query = query.filter(model.created_at >= filters.start_date)
        if filters.end_date is not None:
            query = query.filter(model.created_at <= filters.end_date)
        if filters.client_id is not None:
            query = query.filter(model.client_id == filters.client_id)
        return query

    @staticmethod
    def services_by_type(db: Session, filters: ReportFilters) -> schemas.ServicesByType:
        query = db.query(models.Schedule.service_type, func.count(models.Schedule.id)).filter(
            models.Schedule.status == models.ScheduleStatus.CONCLUIDO
        )
        query = ReportService._apply_filters(query, models.Schedule, filters)
        counts = _empty_counts()
        for service_type, count in query.group_by(models.Schedule.service_type).all():
            counts[_type_key(service_type)] = count
        return schemas.ServicesByType(**counts)

    @staticmethod
    def schedules_by_status(db: Session, filters: ReportFilters) -> schemas.SchedulesByStatus:
        query = db.query(models.Schedule.status, func.count(models.Schedule.id))
        query = ReportService._apply_filters(query, models.Schedule, filters)
        counts: Dict[models.ScheduleStatus, int] = defaultdict(int)
        for status, count in query.group_by(models.Schedule.status).all():
            counts[models.ScheduleStatus(status)] = count
        return schemas.SchedulesByStatus(
            pendentes=sum(counts[status] for status in models.PENDING_STATUSES),
            concluidos=counts[models.ScheduleStatus.CONCLUIDO],
            cancelados=counts[models.ScheduleStatus.CANCELADO],
            atrasados=counts[models.ScheduleStatus.ATRASADO],
        )

    @staticmethod
    def _pending_query(db: Session, filters: ReportFilters, *columns) -> Query:
        query = db.query(*columns).select_from(models.Schedule).filter(
            models.Schedule.status.in_(models.PENDING_STATUSES)
        )
        return ReportService._apply_filters(query, models.Schedule, filters)

    @staticmethod
    def _pivot_by_client(rows: Iterable[Tuple[str, object, int]]) -> Dict[str, Dict[str, int]]:
        pivot: Dict[str, Dict[str, int]] = defaultdict(_empty_counts)
        for client_name, service_type, count in rows:
            pivot[client_name][_type_key(service_type)] += count
        return pivot

    @staticmethod
    def pending_by_client(
        db: Session, filters: ReportFilters
    ) -> list[schemas.PendingByClientRow]:
        """Pending schedules per client and service type; orphaned schedules are skipped."""

        query = (
            ReportService._pending_query(
                db,
                filters,
                models.Client.name,
                models.Schedule.service_type,
                func.count(models.Schedule.id),
            )
            .join(models.Client, models.Client.id == models.Schedule.client_id)
            .group_by(models.Client.name, models.Schedule.service_type)
        )
        pivot = ReportService._pivot_by_client(query.all())
        rows = [
            schemas.PendingByClientRow(client=name, **_with_total(counts))
            for name, counts in pivot.items()
        ]
        rows.sort(key=lambda row: (-row.total, row.client))
        return rows

    @staticmethod
    def pending_by_provider(
        db: Session, filters: ReportFilters
    ) -> list[schemas.PendingByProviderRow]:
        query = (
            ReportService._pending_query(
                db, filters, models.Schedule.provider, func.count(models.Schedule.id)
            )
            .filter(models.Schedule.provider.isnot(None), models.Schedule.provider != "")
            .group_by(models.Schedule.provider)
        )
        rows = [
            schemas.PendingByProviderRow(provider=provider, pending=count)
            for provider, count in query.all()
        ]
        rows.sort(key=lambda row: (-row.pending, row.provider))
        return rows

    @staticmethod
    def _completed_services(db: Session) -> list[Tuple[datetime, object]]:
        return (
            db.query(models.Service.created_at, models.Service.service_type)
            .filter(models.Service.status == models.ScheduleStatus.CONCLUIDO)
            .all()
        )

    @staticmethod
    def evolution_by_month(db: Session) -> list[schemas.EvolutionMonthRow]:
        """All-time monthly trend of completed services; report filters do not apply."""

        buckets: Dict[str, Dict[str, int]] = defaultdict(_empty_counts)
        for created_at, service_type in ReportService._completed_services(db):
            buckets[created_at.strftime("%Y-%m")][_type_key(service_type)] += 1
        return [
            schemas.EvolutionMonthRow(month=month, **_with_total(buckets[month]))
            for month in sorted(buckets)
        ]

    @staticmethod
    def evolution_by_day(db: Session) -> dict[str, list[schemas.EvolutionDayRow]]:
        """Daily trend of completed services keyed by ``YYYY-MM``."""

        buckets: Dict[str, Dict[str, int]] = defaultdict(_empty_counts)
        for created_at, service_type in ReportService._completed_services(db):
            buckets[created_at.strftime("%Y-%m-%d")][_type_key(service_type)] += 1

        months: dict[str, list[schemas.EvolutionDayRow]] = defaultdict(list)
        for day in sorted(buckets):
            months[day[:7]].append(schemas.EvolutionDayRow(day=day, **_with_total(buckets[day])))
        return dict(months)

    @staticmethod
    def services_by_client(db: Session) -> list[schemas.ServicesByClientRow]:
        query = (
            db.query(models.Client.name, func.count(models.Service.id))
            .select_from(models.Service)
            .join(models.Client, models.Client.id == models.Service.client_id)
            .group_by(models.Client.name)
        )
        rows = [schemas.ServicesByClientRow(client=name, total=total) for name, total in query.all()]
        rows.sort(key=lambda row: (-row.total, row.client))
        return rows

    @staticmethod
    def report_daily(
        db: Session,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> schemas.ReportDaily:
        """Services created in the window, today when no complete window is given."""

        if start_date is None or end_date is None:
            today = utcnow().date()
            start_date = datetime.combine(today, time(0, 0, 0))
            end_date = datetime.combine(today, time(23, 59, 59))

        query = (
            db.query(
                models.Client.name,
                models.Service.service_type,
                func.count(models.Service.id),
            )
            .select_from(models.Service)
            .join(models.Client, models.Client.id == models.Service.client_id)
            .filter(
                models.Service.created_at >= start_date,
                models.Service.created_at <= end_date,
            )
            .group_by(models.Client.name, models.Service.service_type)
        )
        pivot = ReportService._pivot_by_client(query.all())

        totals = _empty_counts()
        clients = []
        for name in sorted(pivot):
            counts = pivot[name]
            for key in SERVICE_TYPE_KEYS:
                totals[key] += counts[key]
            clients.append(schemas.ReportDailyRow(client=name, **_with_total(counts)))

        return schemas.ReportDaily(
            start=start_date,
            end=end_date,
            clients=clients,
            totals=schemas.ReportDailyRow(client="Total", **_with_total(totals)),
        )

    @staticmethod
    def report_bundle(db: Session, filters: ReportFilters) -> schemas.ReportBundle:
        return schemas.ReportBundle(
            services_by_type=ReportService.services_by_type(db, filters),
            schedules_by_status=ReportService.schedules_by_status(db, filters),
            pending_by_client=ReportService.pending_by_client(db, filters),
            pending_by_provider=ReportService.pending_by_provider(db, filters),
            evolution_by_month=ReportService.evolution_by_month(db),
            evolution_by_day=ReportService.evolution_by_day(db),
            services_by_client=ReportService.services_by_client(db),
            report_daily=ReportService.report_daily(db, filters.start_date, filters.end_date),
        )
