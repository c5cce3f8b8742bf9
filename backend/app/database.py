"""Database configuration for the field-service backend."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

DEFAULT_SQLITE_PATH = Path(__file__).resolve().parent.parent / "field_service.db"
REQUIRE_POSTGRES_ENV = "REQUIRE_POSTGRES"

# engine keyword -> (environment variable, default)
POOL_SETTINGS: Dict[str, tuple[str, int]] = {
    "pool_size": ("DATABASE_POOL_SIZE", 5),
    "max_overflow": ("DATABASE_MAX_OVERFLOW", 10),
    "pool_timeout": ("DATABASE_POOL_TIMEOUT", 30),
    "pool_recycle": ("DATABASE_POOL_RECYCLE", 1800),
}
CONNECT_TIMEOUT_ENV = "DATABASE_CONNECT_TIMEOUT"
DEFAULT_CONNECT_TIMEOUT = 10


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return value


def _postgres_required() -> bool:
    return (os.getenv(REQUIRE_POSTGRES_ENV) or "").strip().lower() in {"1", "true", "yes", "on"}


def _resolve_database_url(raw_url: str | None) -> str:
    """Turn ``DATABASE_URL`` into a usable URL, creating SQLite directories on the way."""

    url = make_url(raw_url or f"sqlite:///{DEFAULT_SQLITE_PATH.as_posix()}")
    is_sqlite = url.drivername.startswith("sqlite")

    if is_sqlite and _postgres_required():
        if not raw_url:
            raise RuntimeError(
                "DATABASE_URL must be configured for PostgreSQL when REQUIRE_POSTGRES=1"
            )
        raise RuntimeError("SQLite is not permitted when REQUIRE_POSTGRES=1; configure DATABASE_URL")

    if is_sqlite and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return url.render_as_string(hide_password=False)


def enable_sqlite_savepoints(target: Engine) -> None:
    """Let SQLAlchemy drive BEGIN/SAVEPOINT on pysqlite connections.

    The bulk writer isolates each row in a SAVEPOINT; pysqlite's implicit
    transaction handling would otherwise release the outermost savepoint as
    a commit.
    """

    @event.listens_for(target, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None

    @event.listens_for(target, "begin")
    def _emit_begin(connection):
        connection.exec_driver_sql("BEGIN")


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        created = create_engine(url, connect_args={"check_same_thread": False})
        enable_sqlite_savepoints(created)
        return created

    engine_kwargs: Dict[str, Any] = {
        keyword: _read_int_env(env_name, default)
        for keyword, (env_name, default) in POOL_SETTINGS.items()
    }
    engine_kwargs["pool_pre_ping"] = True
    engine_kwargs["connect_args"] = {
        "connect_timeout": _read_int_env(CONNECT_TIMEOUT_ENV, DEFAULT_CONNECT_TIMEOUT)
    }
    return create_engine(url, **engine_kwargs)


SQLALCHEMY_DATABASE_URL = _resolve_database_url(os.getenv("DATABASE_URL"))

engine = build_engine(SQLALCHEMY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator:
    """Yield a database session and ensure it is closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator:
    """Provide a transactional scope for startup tasks and scripts."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
