"""SQLAlchemy model definitions for clients."""

from __future__ import annotations

from sqlalchemy import JSON, Column, DateTime, Index, String, Text, func

from ..database import Base
from ..db_types import GUID
from .common import new_id, utcnow


class Client(Base):
    """A company whose vehicles receive installations and maintenance."""

    __tablename__ = "clients"
    __table_args__ = (Index("clients_name_idx", "name"),)

    id = Column("client_id", GUID(), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    image = Column(JSON, nullable=False, default=list)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False, default="padrão")
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Client id={self.id!r} name={self.name!r}>"
