"""Expose the field-service dashboard FastAPI app and enforce local development CORS defaults."""

import logging
import os
import re
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .database import session_scope
from .migrations import run_database_migrations
from .routers import (
    auth_router,
    clients_router,
    products_router,
    reports_router,
    schedules_router,
    services_router,
    users_router,
)
from .services import UserService

LOGGER = logging.getLogger(__name__)

LOCAL_DEVELOPMENT_ORIGINS = {
    "http://localhost:5173",
    "http://localhost:3000",
}
LOCALHOST_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$"

DEFAULT_ALLOWED_ORIGINS = {
    *LOCAL_DEVELOPMENT_ORIGINS,
    "http://127.0.0.1:5173",
    "http://0.0.0.0:5173",
    "http://127.0.0.1:3000",
    "http://localhost:4173",
    "http://127.0.0.1:4173",
}


def _normalize_origin(origin: str) -> str | None:
    stripped = origin.strip()
    if not stripped:
        return None
    return stripped.rstrip("/")


def _read_allowed_origins(raw_origins: Iterable[str]) -> list[str]:
    normalized = {_normalize_origin(origin) for origin in raw_origins}
    return sorted({origin for origin in normalized if origin})


def _split_raw_origins(raw_value: str) -> list[str]:
    """Split a raw origin string using commas or whitespace as separators."""

    return [origin for origin in re.split(r"[\s,]+", raw_value) if origin]


def _load_allowed_origins_from_env() -> list[str]:
    raw_value = os.getenv("BACKEND_ALLOWED_ORIGINS")
    if not raw_value:
        return []
    return _read_allowed_origins(_split_raw_origins(raw_value))


def _resolve_allowed_origins() -> list[str]:
    env_origins = _load_allowed_origins_from_env()
    if env_origins:
        origins = list(env_origins)
    else:
        origins = _read_allowed_origins(DEFAULT_ALLOWED_ORIGINS)

    missing_dev_origins = [
        origin for origin in LOCAL_DEVELOPMENT_ORIGINS if origin not in origins
    ]
    if missing_dev_origins:
        # The Vite dev server must always reach the API locally.
        origins = _read_allowed_origins([*origins, *missing_dev_origins])

    return origins


def _read_bool_env(name: str, default: bool = True) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def ensure_database_is_ready() -> None:
    """Apply pending database migrations when the service starts."""

    if not _read_bool_env("RUN_MIGRATIONS_ON_STARTUP", True):
        LOGGER.info("Startup migrations disabled via RUN_MIGRATIONS_ON_STARTUP")
        return
    LOGGER.info("Ensuring database schema is up to date before serving requests")
    run_database_migrations()


def ensure_bootstrap_admin() -> None:
    with session_scope() as session:
        UserService.ensure_bootstrap_admin(session)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_database_is_ready()
    ensure_bootstrap_admin()
    yield


app = FastAPI(title="Field Service Dashboard API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_allowed_origins(),
    allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(clients_router, prefix="/clients", tags=["clients"])
app.include_router(products_router, prefix="/products", tags=["products"])
app.include_router(schedules_router, prefix="/schedules", tags=["schedules"])
app.include_router(services_router, prefix="/services", tags=["services"])
app.include_router(reports_router, prefix="/reports", tags=["reports"])
app.include_router(users_router, prefix="/users", tags=["users"])


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


@app.get("/", tags=["health"])
def read_root() -> dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}
