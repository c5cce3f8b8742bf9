"""Business logic related to client resources."""

from __future__ import annotations

from typing import Iterable, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import is_uuid
from .uploads import store_images


class ClientService:
    """Encapsulates CRUD operations for clients."""

    @staticmethod
    def list_clients(db: Session) -> list[models.Client]:
        return db.query(models.Client).order_by(models.Client.name).all()

    @staticmethod
    def get_client(db: Session, client_id: str) -> Optional[models.Client]:
        if not is_uuid(client_id):
            return None
        return db.get(models.Client, client_id)

    @staticmethod
    def create_client(db: Session, data: schemas.ClientCreate) -> models.Client:
        client = models.Client(**data.model_dump())
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(
        db: Session, client: models.Client, data: schemas.ClientUpdate
    ) -> models.Client:
        updates = data.model_dump(exclude_unset=True)
        for required in ("name", "type"):
            if updates.get(required) is None:
                updates.pop(required, None)
        if "image" in updates and updates["image"] is None:
            updates["image"] = []
        for key, value in updates.items():
            setattr(client, key, value)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: models.Client) -> None:
        """Delete ``client``; schedules and services keep the dangling id."""

        db.delete(client)
        db.commit()

    @staticmethod
    def add_images(
        db: Session, client: models.Client, files: Iterable[UploadFile]
    ) -> models.Client:
        stored = store_images("clients", files)
        client.image = [*(client.image or []), *stored]
        db.add(client)
        db.commit()
        db.refresh(client)
        return client
