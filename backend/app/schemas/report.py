"""Pydantic schemas for the dashboard reports."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class ServiceTypeCounts(CamelModel):
    installation: int = 0
    maintenance: int = 0
    removal: int = 0


class ServicesByType(ServiceTypeCounts):
    """Completed schedules per service type."""


class SchedulesByStatus(CamelModel):
    pendentes: int = 0
    concluidos: int = 0
    cancelados: int = 0
    atrasados: int = 0


class PendingByClientRow(ServiceTypeCounts):
    client: str
    total: int = 0


class PendingByProviderRow(CamelModel):
    provider: str
    pending: int = 0


class EvolutionDayRow(ServiceTypeCounts):
    day: str
    total: int = 0


class EvolutionMonthRow(ServiceTypeCounts):
    month: str
    total: int = 0


class ServicesByClientRow(CamelModel):
    client: str
    total: int = 0


class ReportDailyRow(ServiceTypeCounts):
    client: str
    total: int = 0


class ReportDaily(CamelModel):
    """Services created in a window, per client, with grand totals."""

    start: datetime
    end: datetime
    clients: list[ReportDailyRow] = Field(default_factory=list)
    totals: ReportDailyRow


class ReportBundle(CamelModel):
    services_by_type: ServicesByType
    schedules_by_status: SchedulesByStatus
    pending_by_client: list[PendingByClientRow] = Field(default_factory=list)
    pending_by_provider: list[PendingByProviderRow] = Field(default_factory=list)
    evolution_by_month: list[EvolutionMonthRow] = Field(default_factory=list)
    evolution_by_day: dict[str, list[EvolutionDayRow]] = Field(default_factory=dict)
    services_by_client: list[ServicesByClientRow] = Field(default_factory=list)
    report_daily: ReportDaily
