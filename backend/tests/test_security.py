import time

import pytest
from fastapi import HTTPException

from backend.app import models
from backend.app.security import (
    _decode_jwt,
    _encode_jwt,
    _load_jwt_key,
    create_access_token,
    generate_password_hash,
    verify_password,
)
from backend.app.services import UserService


def test_password_hash_round_trip():
    stored = generate_password_hash("s3nha-forte", iterations=1_000)

    assert stored.startswith("1000$")
    assert verify_password("s3nha-forte", stored)
    assert not verify_password("outra", stored)


def test_empty_password_is_rejected():
    with pytest.raises(ValueError):
        generate_password_hash("")


def test_tampered_token_is_rejected(admin_user):
    token = create_access_token(admin_user)
    header, payload, signature = token.split(".")

    with pytest.raises(HTTPException) as excinfo:
        _decode_jwt(f"{header}.{payload}.{signature[::-1]}", _load_jwt_key())
    assert excinfo.value.status_code == 401


def test_expired_token_is_rejected():
    token = _encode_jwt({"sub": "x", "exp": int(time.time()) - 10}, _load_jwt_key())

    with pytest.raises(HTTPException) as excinfo:
        _decode_jwt(token, _load_jwt_key())
    assert excinfo.value.detail == "Token expirado"


def test_login_returns_token_and_user(anonymous_client, admin_user):
    response = anonymous_client.post(
        "/auth/login",
        json={"email": "  ADMIN@example.com ", "password": "Adm1nS3cret!"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["email"] == "admin@example.com"
    assert "passwordHash" not in body["user"]


def test_login_with_wrong_password_fails(anonymous_client, admin_user):
    response = anonymous_client.post(
        "/auth/login",
        json={"email": "admin@example.com", "password": "errada"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Credenciais inválidas"


def test_me_returns_the_authenticated_user(client):
    response = client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["role"] == "administrator"


def test_garbage_bearer_token_is_rejected(anonymous_client):
    response = anonymous_client.get("/auth/me", headers={"Authorization": "Bearer nada"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token inválido"


def test_bootstrap_admin_is_created_once(db_session, monkeypatch):
    monkeypatch.setenv("ADMIN_EMAIL", "Root@Example.com")
    monkeypatch.setenv("ADMIN_PASSWORD", "root-pass")

    created = UserService.ensure_bootstrap_admin(db_session)
    again = UserService.ensure_bootstrap_admin(db_session)

    assert created.id == again.id
    assert created.email == "root@example.com"
    assert created.role is models.UserRole.ADMINISTRATOR
    assert db_session.query(models.User).count() == 1


def test_bootstrap_admin_is_skipped_without_settings(db_session, monkeypatch):
    monkeypatch.delenv("ADMIN_EMAIL", raising=False)

    assert UserService.ensure_bootstrap_admin(db_session) is None
