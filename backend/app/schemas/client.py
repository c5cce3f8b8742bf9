"""Pydantic schemas for the client catalog."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .common import CamelModel


class ClientBase(CamelModel):
    """Attributes shared by create and update operations."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    type: str = "padrão"
    image: list[str] = Field(default_factory=list)


class ClientCreate(ClientBase):
    """Schema used when creating a client."""


class ClientUpdate(CamelModel):
    """Schema used when updating an existing client."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    type: Optional[str] = None
    image: Optional[list[str]] = None


class ClientRead(ClientBase):
    """Schema used when returning client data."""

    id: str
    created_at: datetime
    updated_at: datetime
