"""Storage of catalog images sent as multipart uploads."""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import Iterable

from fastapi import UploadFile

LOGGER = logging.getLogger(__name__)

UPLOAD_DIR_ENV = "UPLOAD_DIR"
_DEFAULT_UPLOAD_DIR = Path(__file__).resolve().parents[2] / "uploads"


class ImageUploadError(ValueError):
    """Raised when an uploaded file is not an image."""


def resolve_upload_dir() -> Path:
    raw = os.getenv(UPLOAD_DIR_ENV)
    return Path(raw) if raw else _DEFAULT_UPLOAD_DIR


def _extension(filename: str | None) -> str:
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    return "png"


def store_images(folder: str, files: Iterable[UploadFile]) -> list[str]:
    """Write ``files`` below ``UPLOAD_DIR/folder`` and return relative paths."""

    pending = list(files)
    for upload in pending:
        if not upload.content_type or not upload.content_type.startswith("image/"):
            raise ImageUploadError("Arquivo deve ser uma imagem")

    target_dir = resolve_upload_dir() / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    stored: list[str] = []
    for upload in pending:
        filename = f"{uuid.uuid4().hex}.{_extension(upload.filename)}"
        with open(target_dir / filename, "wb") as handle:
            handle.write(upload.file.read())
        stored.append(f"/uploads/{folder}/{filename}")
    LOGGER.info("Stored %d image(s) under %s", len(stored), target_dir)
    return stored
