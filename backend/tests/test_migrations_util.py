from __future__ import annotations

from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text

from backend.app.database import Base
from backend.app.migrations import (
    REVISION_SENTINELS,
    build_alembic_config,
    detect_revision,
    run_database_migrations,
)


def _expected_head() -> str:
    return ScriptDirectory.from_config(build_alembic_config()).get_current_head()


def test_run_database_migrations_upgrades_existing_database(tmp_path, monkeypatch) -> None:
    db_path = tmp_path / "legacy.db"
    url = f"sqlite:///{db_path}"

    engine = create_engine(url, connect_args={"check_same_thread": False})
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy_table (id INTEGER PRIMARY KEY)"))
    engine.dispose()

    monkeypatch.setenv("DATABASE_URL", url)
    run_database_migrations()

    engine = create_engine(url, connect_args={"check_same_thread": False})
    inspector = inspect(engine)

    tables = inspector.get_table_names()
    assert "legacy_table" in tables
    assert "alembic_version" in tables
    assert {"clients", "products", "schedules", "services", "users"} <= set(tables)

    with engine.connect() as connection:
        version = connection.scalar(text("SELECT version_num FROM alembic_version"))
    assert version == _expected_head()

    engine.dispose()


def test_run_database_migrations_stamps_head_for_current_schema(tmp_path) -> None:
    db_path = tmp_path / "current.db"
    url = f"sqlite:///{db_path}"

    engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    assert detect_revision(inspect(engine)) == REVISION_SENTINELS[0][0]
    engine.dispose()

    run_database_migrations(url)

    engine = create_engine(url, connect_args={"check_same_thread": False})
    inspector = inspect(engine)

    assert inspector.has_table("alembic_version")
    assert inspector.has_table("schedules")

    with engine.connect() as connection:
        version = connection.scalar(text("SELECT version_num FROM alembic_version"))
    assert version == _expected_head()

    engine.dispose()
