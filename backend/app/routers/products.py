"""Router containing CRUD operations for products."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..security import get_current_user, require_admin
from ..services import ProductService, ImageUploadError

router = APIRouter(dependencies=[Depends(get_current_user)])


def _get_or_404(db: Session, product_id: str) -> models.Product:
    product = ProductService.get_product(db, product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Produto não encontrado")
    return product


@router.get("", response_model=list[schemas.ProductRead])
def list_products(db: Session = Depends(get_db)) -> list[models.Product]:
    """Return every product ordered by name."""
    return ProductService.list_products(db)


@router.get("/{product_id}", response_model=schemas.ProductRead)
def get_product(product_id: str, db: Session = Depends(get_db)) -> models.Product:
    return _get_or_404(db, product_id)


@router.post(
    "",
    response_model=schemas.ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(product_in: schemas.ProductCreate, db: Session = Depends(get_db)) -> models.Product:
    return ProductService.create_product(db, product_in)


@router.put("/{product_id}", response_model=schemas.ProductRead, dependencies=[Depends(require_admin)])
def update_product(
    product_id: str,
    product_in: schemas.ProductUpdate,
    db: Session = Depends(get_db),
) -> models.Product:
    return ProductService.update_product(db, _get_or_404(db, product_id), product_in)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(product_id: str, db: Session = Depends(get_db)) -> None:
    """Delete a product; schedules referencing it are left untouched."""
    ProductService.delete_product(db, _get_or_404(db, product_id))


@router.post(
    "/{product_id}/images",
    response_model=schemas.ProductRead,
    dependencies=[Depends(require_admin)],
)
def upload_product_images(
    product_id: str,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
) -> models.Product:
    """Store uploaded photos and append their paths to the product."""

    product = _get_or_404(db, product_id)
    try:
        return ProductService.add_images(db, product, files)
    except ImageUploadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
