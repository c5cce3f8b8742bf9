"""Router containing CRUD operations for clients."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..security import get_current_user, require_admin
from ..services import ClientService, ImageUploadError

router = APIRouter(dependencies=[Depends(get_current_user)])


def _get_or_404(db: Session, client_id: str) -> models.Client:
    client = ClientService.get_client(db, client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente não encontrado")
    return client


@router.get("", response_model=list[schemas.ClientRead])
def list_clients(db: Session = Depends(get_db)) -> list[models.Client]:
    """Return every client ordered by name."""
    return ClientService.list_clients(db)


@router.get("/{client_id}", response_model=schemas.ClientRead)
def get_client(client_id: str, db: Session = Depends(get_db)) -> models.Client:
    return _get_or_404(db, client_id)


@router.post(
    "",
    response_model=schemas.ClientRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_client(client_in: schemas.ClientCreate, db: Session = Depends(get_db)) -> models.Client:
    return ClientService.create_client(db, client_in)


@router.put("/{client_id}", response_model=schemas.ClientRead, dependencies=[Depends(require_admin)])
def update_client(
    client_id: str,
    client_in: schemas.ClientUpdate,
    db: Session = Depends(get_db),
) -> models.Client:
    return ClientService.update_client(db, _get_or_404(db, client_id), client_in)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_client(client_id: str, db: Session = Depends(get_db)) -> None:
    """Delete a client; schedules referencing it are left untouched."""
    ClientService.delete_client(db, _get_or_404(db, client_id))


@router.post(
    "/{client_id}/images",
    response_model=schemas.ClientRead,
    dependencies=[Depends(require_admin)],
)
def upload_client_images(
    client_id: str,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
) -> models.Client:
    """Store uploaded logos/photos and append their paths to the client."""

    client = _get_or_404(db, client_id)
    try:
        return ClientService.add_images(db, client, files)
    except ImageUploadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
