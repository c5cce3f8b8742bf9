"""Authentication endpoints for dashboard users."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..security import authenticate_user, create_access_token, get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=schemas.TokenResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)) -> schemas.TokenResponse:
    """Authenticate a user and return an access token."""

    user = authenticate_user(db, payload.email, payload.password)
    return schemas.TokenResponse(
        access_token=create_access_token(user),
        user=schemas.UserRead.model_validate(user),
    )


@router.get("/me", response_model=schemas.UserRead)
def read_current_user(user: models.User = Depends(get_current_user)) -> models.User:
    return user
