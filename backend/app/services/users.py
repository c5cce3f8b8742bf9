"""Business logic for dashboard user accounts."""

from __future__ import annotations

import logging
import os
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import is_uuid
from ..security import generate_password_hash

LOGGER = logging.getLogger(__name__)

ADMIN_EMAIL_ENV = "ADMIN_EMAIL"
ADMIN_PASSWORD_ENV = "ADMIN_PASSWORD"
ADMIN_NAME_ENV = "ADMIN_NAME"


class UserServiceError(Exception):
    """Base class for user related errors."""


class DuplicateEmailError(UserServiceError):
    """Raised when an e-mail address is already registered."""


class UserService:
    """CRUD operations for users; passwords are stored hashed only."""

    @staticmethod
    def list_users(db: Session) -> list[models.User]:
        return db.query(models.User).order_by(models.User.name).all()

    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[models.User]:
        if not is_uuid(user_id):
            return None
        return db.get(models.User, user_id)

    @staticmethod
    def _commit(db: Session, user: models.User) -> models.User:
        db.add(user)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateEmailError("E-mail já cadastrado") from exc
        db.refresh(user)
        return user

    @staticmethod
    def create_user(db: Session, data: schemas.UserCreate) -> models.User:
        payload = data.model_dump(exclude={"password"})
        user = models.User(**payload, password_hash=generate_password_hash(data.password))
        return UserService._commit(db, user)

    @staticmethod
    def update_user(db: Session, user: models.User, data: schemas.UserUpdate) -> models.User:
        updates = data.model_dump(exclude_unset=True)
        password = updates.pop("password", None)
        if password:
            user.password_hash = generate_password_hash(password)
        for key, value in updates.items():
            if value is not None:
                setattr(user, key, value)
        return UserService._commit(db, user)

    @staticmethod
    def delete_user(db: Session, user: models.User) -> None:
        db.delete(user)
        db.commit()

    @staticmethod
    def ensure_bootstrap_admin(db: Session) -> Optional[models.User]:
        """Create the administrator named by ``ADMIN_EMAIL`` if it is missing."""

        email = (os.getenv(ADMIN_EMAIL_ENV) or "").strip().lower()
        password = os.getenv(ADMIN_PASSWORD_ENV)
        if not email or not password:
            return None

        existing = db.query(models.User).filter(models.User.email == email).first()
        if existing is not None:
            return existing

        user = models.User(
            name=os.getenv(ADMIN_NAME_ENV) or "Administrador",
            email=email,
            password_hash=generate_password_hash(password),
            role=models.UserRole.ADMINISTRATOR,
        )
        db.add(user)
        db.commit()
        LOGGER.info("Created bootstrap administrator %s", email)
        return user
