from backend.app import models


def test_admin_manages_users(client):
    created = client.post(
        "/users",
        json={
            "name": "Ana Agendamento",
            "email": "Ana@Example.com",
            "password": "agenda123",
            "role": "scheduling",
        },
    )
    assert created.status_code == 201, created.text
    user = created.json()
    assert user["email"] == "ana@example.com"
    assert "password" not in user

    listed = client.get("/users").json()
    assert {item["email"] for item in listed} == {"admin@example.com", "ana@example.com"}

    updated = client.put(f"/users/{user['id']}", json={"role": "validation"})
    assert updated.status_code == 200
    assert updated.json()["role"] == "validation"

    assert client.delete(f"/users/{user['id']}").status_code == 204
    missing = client.get(f"/users/{user['id']}")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Usuário não encontrado"


def test_duplicate_email_is_rejected(client):
    response = client.post(
        "/users",
        json={"name": "Outro", "email": "admin@example.com", "password": "qualquer"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "E-mail já cadastrado"


def test_updated_password_allows_login(client, db_session):
    admin = db_session.query(models.User).filter_by(email="admin@example.com").one()
    assert client.put(f"/users/{admin.id}", json={"password": "nova-senha"}).status_code == 200

    response = client.post(
        "/auth/login", json={"email": "admin@example.com", "password": "nova-senha"}
    )
    assert response.status_code == 200


def test_non_admin_cannot_manage_users(login_as):
    billing = login_as(models.UserRole.BILLING)

    response = billing.get("/users")

    assert response.status_code == 403
