"""SQLAlchemy model definitions for dashboard users."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Enum, String, func

from ..database import Base
from ..db_types import GUID
from .common import new_id, utcnow
from .enums import UserRole


class User(Base):
    """An operator account; the role decides which routes are reachable."""

    __tablename__ = "users"

    id = Column("user_id", GUID(), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    role = Column(
        Enum(
            UserRole,
            name="user_role_enum",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=UserRole.SCHEDULING,
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
