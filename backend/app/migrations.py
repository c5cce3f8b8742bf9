"""Utility helpers to ensure the database schema is up to date."""

from __future__ import annotations

import errno
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine.reflection import Inspector

from .database import SQLALCHEMY_DATABASE_URL

LOGGER = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
LOCK_FILENAME = ".alembic-migration.lock"
LOCK_RETRY_DELAY = 0.25
LOCK_TIMEOUT_ENV = "ALEMBIC_MIGRATION_LOCK_TIMEOUT"
DEFAULT_LOCK_TIMEOUT = 30.0

if os.name == "posix":  # pragma: no cover - platform specific
    import fcntl
else:  # pragma: no cover - platform specific
    import msvcrt

RevisionSentinel = tuple[str, Callable[[Inspector], bool]]

# Newest first: the first matching check names the revision an unversioned
# database already corresponds to.
REVISION_SENTINELS: Sequence[RevisionSentinel] = (
    (
        "20250110_0001",
        lambda inspector: all(
            inspector.has_table(table)
            for table in ("clients", "products", "schedules", "services", "users")
        ),
    ),
)


def _read_lock_timeout() -> float:
    raw = os.getenv(LOCK_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_LOCK_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning(
            "Invalid %s=%s; falling back to %.1f seconds", LOCK_TIMEOUT_ENV, raw, DEFAULT_LOCK_TIMEOUT
        )
        return DEFAULT_LOCK_TIMEOUT
    if value <= 0:
        LOGGER.warning("%s must be positive; using %.1f seconds", LOCK_TIMEOUT_ENV, DEFAULT_LOCK_TIMEOUT)
        return DEFAULT_LOCK_TIMEOUT
    return value


def _is_lock_conflict(error: OSError) -> bool:
    if getattr(error, "errno", None) in {errno.EACCES, errno.EAGAIN, errno.EBUSY}:
        return True
    # Windows reports sharing (32) and lock (33) violations instead.
    return getattr(error, "winerror", None) in {32, 33}


def _lock(fileobj) -> None:
    if os.name == "posix":  # pragma: no cover - platform specific
        fcntl.flock(fileobj.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    else:  # pragma: no cover - platform specific
        msvcrt.locking(fileobj.fileno(), msvcrt.LK_NBLCK, 1)


def _unlock(fileobj) -> None:
    if os.name == "posix":  # pragma: no cover - platform specific
        fcntl.flock(fileobj.fileno(), fcntl.LOCK_UN)
    else:  # pragma: no cover - platform specific
        msvcrt.locking(fileobj.fileno(), msvcrt.LK_UNLCK, 1)


@contextmanager
def migration_lock(path: Path, *, timeout: float) -> Iterator[None]:
    """Serialise migrations across worker processes sharing ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout
    with path.open("a+") as handle:
        while True:
            try:
                _lock(handle)
                break
            except OSError as error:
                if not isinstance(error, BlockingIOError) and not _is_lock_conflict(error):
                    raise
                if time.monotonic() >= deadline:
                    raise TimeoutError("Timed out waiting for Alembic migration lock") from error
                time.sleep(LOCK_RETRY_DELAY)
        LOGGER.debug("Acquired Alembic migration lock at %s", path)
        try:
            yield
        finally:
            _unlock(handle)


def detect_revision(inspector: Inspector, sentinels: Iterable[RevisionSentinel] = REVISION_SENTINELS) -> str | None:
    for revision, check in sentinels:
        if check(inspector):
            return revision
    return None


def build_alembic_config(database_url: str | None = None) -> Config:
    config = Config(str(BASE_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BASE_DIR / "alembic"))
    config.set_main_option(
        "sqlalchemy.url", database_url or os.getenv("DATABASE_URL") or SQLALCHEMY_DATABASE_URL
    )
    return config


def run_database_migrations(database_url: str | None = None) -> None:
    """Upgrade the database to the latest revision.

    A database whose tables were created without Alembic (for example with
    ``Base.metadata.create_all``) is stamped with the matching revision first.
    """

    config = build_alembic_config(database_url)
    final_url = config.get_main_option("sqlalchemy.url")
    LOGGER.info("Running database migrations at %s", final_url)

    with migration_lock(BASE_DIR / LOCK_FILENAME, timeout=_read_lock_timeout()):
        connect_args = {"check_same_thread": False} if final_url.startswith("sqlite") else {}
        engine = create_engine(final_url, connect_args=connect_args)
        try:
            inspector = inspect(engine)
            if not inspector.has_table("alembic_version"):
                detected = detect_revision(inspector)
                if detected:
                    LOGGER.info("Existing schema matches revision %s; stamping before upgrade", detected)
                    command.stamp(config, detected)
            head = ScriptDirectory.from_config(config).get_current_head()
            command.upgrade(config, "head")
            LOGGER.info("Database schema at revision %s", head)
        finally:
            engine.dispose()
