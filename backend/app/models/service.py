"""SQLAlchemy model definitions for completed service records."""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from ..database import Base
from ..db_types import GUID
from .common import new_id, utcnow
from .enums import ScheduleStatus, ServiceSource, ServiceType


class Service(Base):
    """A validated service, the historical counterpart of a schedule."""

    __tablename__ = "services"
    __table_args__ = (
        Index("services_vin_idx", "vin"),
        Index("services_created_at_idx", "created_at"),
        Index("services_client_idx", "client_id"),
    )

    id = Column("service_id", GUID(), primary_key=True, default=new_id)
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
        default=ScheduleStatus.CONCLUIDO,
    )
    provider = Column(String, nullable=True)
    order_number = Column(String, nullable=True)

    device_id = Column(String, nullable=True)
    technician = Column(String, nullable=True)
    installation_location = Column(String, nullable=True)
    service_address = Column(String, nullable=True)
    odometer = Column(Integer, nullable=True)
    blocking_enabled = Column(Boolean, nullable=False, default=True)
    protocol_number = Column(String, nullable=True)
    validation_notes = Column(Text, nullable=True)
    secondary_device = Column(String, nullable=True)
    validated_by = Column(String, nullable=True)
    validated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    schedule_id = Column(GUID(), nullable=True)
    source = Column(
        Enum(
            ServiceSource,
            name="service_source_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ServiceSource.VALIDATION,
    )
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
        primaryjoin="foreign(Service.client_id) == Client.id",
        viewonly=True,
    )
    product = relationship(
        "Product",
        primaryjoin="foreign(Service.product_id) == Product.id",
        viewonly=True,
    )
    schedule = relationship(
        "Schedule",
        primaryjoin="foreign(Service.schedule_id) == Schedule.id",
        viewonly=True,
    )
