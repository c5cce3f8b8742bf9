"""Enumerations shared by schedules, services and users."""

from __future__ import annotations

import enum


class ServiceType(str, enum.Enum):
    """Category of field work performed on a vehicle."""

    INSTALLATION = "installation"
    MAINTENANCE = "maintenance"
    REMOVAL = "removal"


class ScheduleStatus(str, enum.Enum):
    """Lifecycle states of a schedule. Transitions are not enforced."""

    CRIADO = "criado"
    AGENDADO = "agendado"
    CONCLUIDO = "concluido"
    ATRASADO = "atrasado"
    CANCELADO = "cancelado"


PENDING_STATUSES = (ScheduleStatus.CRIADO, ScheduleStatus.AGENDADO)


class ServiceSource(str, enum.Enum):
    """How a service record entered the system."""

    VALIDATION = "validation"
    IMPORT = "import"
    LEGACY = "legacy"


class UserRole(str, enum.Enum):
    """Roles that gate access to the API routes."""

    ADMINISTRATOR = "administrator"
    SCHEDULING = "scheduling"
    SUPPORT = "support"
    VALIDATION = "validation"
    BILLING = "billing"
