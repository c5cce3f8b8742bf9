"""Shared schema definitions."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase keys to the dashboard frontend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EntityRef(CamelModel):
    """Minimal projection of a referenced client or product."""

    id: str
    name: str
    image: list[str] = Field(default_factory=list)


class BulkOperationResponse(CamelModel):
    """Outcome of a bulk create, update or import."""

    success: bool = True
    count: int = Field(..., ge=0)
    message: str
    errors: Optional[list[str]] = None


class ErrorResponse(CamelModel):
    """Body returned when a batch is rejected before anything is written."""

    error: str
    details: list[Any] = Field(default_factory=list)


class MessageResponse(CamelModel):
    message: str
