from pathlib import Path

from backend.app import models


def test_client_crud(client):
    created = client.post("/clients", json={"name": "Frota Sul", "type": "Sub-Cliente"})
    assert created.status_code == 201, created.text
    body = created.json()
    assert body["image"] == []

    updated = client.put(
        f"/clients/{body['id']}", json={"description": "Frota regional", "name": None}
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Frota Sul"
    assert updated.json()["description"] == "Frota regional"

    assert client.delete(f"/clients/{body['id']}").status_code == 204
    missing = client.get(f"/clients/{body['id']}")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Cliente não encontrado"


def test_clients_are_listed_by_name(client, catalog):
    names = [item["name"] for item in client.get("/clients").json()]
    assert names == ["Beta Logística", "Transportes Acme"]


def test_deleting_client_keeps_schedules(client, db_session, catalog):
    schedule = models.Schedule(
        vin="ORFAO",
        model="X",
        service_type=models.ServiceType.MAINTENANCE,
        client_id=catalog["beta"].id,
    )
    db_session.add(schedule)
    db_session.commit()
    client_id = catalog["beta"].id

    assert client.delete(f"/clients/{client_id}").status_code == 204

    body = client.get(f"/schedules/{schedule.id}").json()
    assert body["clientId"] == client_id
    assert body["client"] is None


def test_product_image_upload(client, catalog, monkeypatch, tmp_path):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))
    product_id = catalog["tracker"].id

    response = client.post(
        f"/products/{product_id}/images",
        files=[
            ("files", ("frente.jpg", b"\xff\xd8fake", "image/jpeg")),
            ("files", ("lado.png", b"\x89PNGfake", "image/png")),
        ],
    )

    assert response.status_code == 200, response.text
    images = response.json()["image"]
    assert len(images) == 2
    assert all(path.startswith("/uploads/products/") for path in images)
    stored = tmp_path / "products" / Path(images[0]).name
    assert stored.read_bytes() == b"\xff\xd8fake"


def test_non_image_upload_is_rejected(client, catalog, tmp_path, monkeypatch):
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path))

    response = client.post(
        f"/clients/{catalog['acme'].id}/images",
        files=[("files", ("notas.txt", b"texto", "text/plain"))],
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Arquivo deve ser uma imagem"
    assert not (tmp_path / "clients").exists()


def test_catalog_writes_require_admin(login_as):
    scheduler = login_as(models.UserRole.SCHEDULING)

    assert scheduler.get("/products").status_code == 200
    assert scheduler.post("/products", json={"name": "Sensor"}).status_code == 403
