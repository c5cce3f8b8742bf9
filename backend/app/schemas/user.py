"""Pydantic schemas for dashboard users."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ..models import UserRole
from .common import CamelModel


def _normalize_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    return value.strip().lower()


class UserBase(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    role: UserRole = UserRole.SCHEDULING

    @field_validator("email")
    @classmethod
    def _clean_email(cls, value: str) -> str:
        return _normalize_email(value)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(CamelModel):
    """Partial update; a new password is hashed before it is stored."""

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3)
    role: Optional[UserRole] = None
    password: Optional[str] = Field(default=None, min_length=6)

    @field_validator("email")
    @classmethod
    def _clean_email(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_email(value)


class UserRead(UserBase):
    id: str
    created_at: datetime
    updated_at: datetime
