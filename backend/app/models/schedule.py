"""SQLAlchemy model definitions for planned service visits."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Enum, Index, String, Text, func
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID
from .common import new_id, utcnow
from .enums import ScheduleStatus, ServiceType


class Schedule(Base):
    """A planned installation, maintenance visit or removal for a vehicle.

    ``client_id`` and ``product_id`` are plain references without database
    level foreign keys: deleting a client or product never cascades and the
    schedule keeps pointing at the removed identifier.
    """

    __tablename__ = "schedules"
    __table_args__ = (
        Index("schedules_vin_idx", "vin"),
        Index("schedules_status_idx", "status"),
        Index("schedules_client_idx", "client_id"),
    )

    id = Column("schedule_id", GUID(), primary_key=True, default=new_id)
    plate = Column(String, nullable=True)
    vin = Column(String, nullable=False)
    model = Column(String, nullable=False)
    scheduled_date = Column(DateTime(timezone=True), nullable=True)
    service_type = Column(
        Enum(
            ServiceType,
            name="service_type_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
    )
    notes = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)
    client_id = Column(GUID(), nullable=False)
    product_id = Column(GUID(), nullable=True)
    status = Column(
        Enum(
            ScheduleStatus,
            name="schedule_status_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ScheduleStatus.CRIADO,
    )
    provider = Column(String, nullable=True)
    order_number = Column(String, nullable=True)
    service_location = Column(String, nullable=True)
    responsible_name = Column(String, nullable=True)
    responsible_phone = Column(String, nullable=True)
    service_id = Column(GUID(), nullable=True)
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    client = relationship(
        "Client",
        primaryjoin="foreign(Schedule.client_id) == Client.id",
        viewonly=True,
    )
    product = relationship(
        "Product",
        primaryjoin="foreign(Schedule.product_id) == Product.id",
        viewonly=True,
    )
