"""FastAPI application package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    # Alembic and the import scripts load the models without the web app.
    from .main import app as fastapi_app


def get_app():
    """Return the FastAPI application without importing it eagerly."""

    from .main import app as fastapi_app

    return fastapi_app


def __getattr__(name: str):
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["app", "get_app"]
