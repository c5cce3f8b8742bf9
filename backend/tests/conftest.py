from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the project root (which exposes the ``backend`` package) is on ``sys.path``
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-field-service-dashboard")
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "0"
os.environ.pop("ADMIN_EMAIL", None)
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="uploads-"))

from backend.app import models
from backend.app.database import Base, enable_sqlite_savepoints, get_db
from backend.app.main import app
from backend.app.security import generate_password_hash

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Adm1nS3cret!"

SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_savepoints(engine)
TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    join_transaction_mode="create_savepoint",
)


@pytest.fixture(scope="session", autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


def make_user(
    db_session: Session,
    *,
    email: str,
    password: str,
    role: models.UserRole,
    name: str = "Usuário Teste",
) -> models.User:
    user = models.User(
        name=name,
        email=email,
        # A low iteration count keeps the suite fast.
        password_hash=generate_password_hash(password, iterations=1_000),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session: Session) -> models.User:
    return make_user(
        db_session,
        email=ADMIN_EMAIL,
        password=ADMIN_PASSWORD,
        role=models.UserRole.ADMINISTRATOR,
        name="Administrador",
    )


@pytest.fixture
def anonymous_client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            db_session.expire_all()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.pop(get_db, None)


def login(test_client: TestClient, email: str, password: str) -> None:
    response = test_client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["accessToken"]
    test_client.headers.update({"Authorization": f"Bearer {token}"})


@pytest.fixture
def client(anonymous_client: TestClient, admin_user: models.User) -> TestClient:
    login(anonymous_client, ADMIN_EMAIL, ADMIN_PASSWORD)
    return anonymous_client


@pytest.fixture
def catalog(db_session: Session) -> dict:
    acme = models.Client(name="Transportes Acme", type="Cliente")
    beta = models.Client(name="Beta Logística", type="Sub-Cliente")
    tracker = models.Product(name="Rastreador 4G", category="Rastreador")
    camera = models.Product(name="Câmera Veicular", category="Vídeo")
    db_session.add_all([acme, beta, tracker, camera])
    db_session.commit()
    return {"acme": acme, "beta": beta, "tracker": tracker, "camera": camera}


@pytest.fixture
def login_as(anonymous_client: TestClient, db_session: Session):
    """Log the test client in as a fresh user holding ``role``."""

    def _login(role: models.UserRole) -> TestClient:
        email = f"{role.value}@example.com"
        make_user(db_session, email=email, password="Senha123", role=role)
        login(anonymous_client, email, "Senha123")
        return anonymous_client

    return _login
