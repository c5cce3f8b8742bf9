"""Business logic related to product resources."""

from __future__ import annotations

from typing import Iterable, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from .. import models, schemas
from ..db_types import is_uuid
from .uploads import store_images


class ProductService:
    """Encapsulates CRUD operations for products."""

    @staticmethod
    def list_products(db: Session) -> list[models.Product]:
        return db.query(models.Product).order_by(models.Product.name).all()

    @staticmethod
    def get_product(db: Session, product_id: str) -> Optional[models.Product]:
        if not is_uuid(product_id):
            return None
        return db.get(models.Product, product_id)

    @staticmethod
    def create_product(db: Session, data: schemas.ProductCreate) -> models.Product:
        product = models.Product(**data.model_dump())
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(
        db: Session, product: models.Product, data: schemas.ProductUpdate
    ) -> models.Product:
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name") is None:
            updates.pop("name", None)
        if "image" in updates and updates["image"] is None:
            updates["image"] = []
        for key, value in updates.items():
            setattr(product, key, value)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def delete_product(db: Session, product: models.Product) -> None:
        """Delete ``product``; referencing schedules keep the dangling id."""

        db.delete(product)
        db.commit()

    @staticmethod
    def add_images(
        db: Session, product: models.Product, files: Iterable[UploadFile]
    ) -> models.Product:
        stored = store_images("products", files)
        product.image = [*(product.image or []), *stored]
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
