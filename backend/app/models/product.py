"""SQLAlchemy model definitions for the equipment catalog."""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Index, String, Text, func

from ..database import Base
from ..db_types import GUID
from .common import new_id, utcnow


class Product(Base):
    """Tracking device or accessory installed in a vehicle."""

    __tablename__ = "products"
    __table_args__ = (Index("products_name_idx", "name"),)

    id = Column("product_id", GUID(), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    image = Column(JSON, nullable=False, default=list)
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
