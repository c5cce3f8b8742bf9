"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import Field

from .common import CamelModel
from .user import UserRead


class LoginRequest(CamelModel):
    """Credentials posted by the login form."""

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    """Access token returned upon successful authentication."""

    access_token: str
    token_type: str = "bearer"
    user: UserRead
