from pathlib import Path

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from agridirect.models.farmer import Farmer


def _register_farmer(client, image_file=None, **overrides):
    data = {
        "name": "Ravi Kumar",
        "email": "ravi@example.com",
        "password": "s3cret",
        "farm_name": "Sunrise Farm",
        "location": "Pune",
        "mobile": "9876543210",
        "experience": "7",
    }
    data.update(overrides)
    files = {"qr_code": image_file("upi.png")} if image_file else None
    return client.post("/farmers/register", data=data, files=files)


def test_register_farmer_hides_credentials(client, db):
    resp = _register_farmer(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "ravi@example.com"
    assert body["experience"] == 7
    assert "password" not in body and "hashed_password" not in body

    stored = db.get(Farmer, body["id"])
    assert stored.hashed_password != "s3cret"


def test_duplicate_farmer_email_conflicts(client, db):
    _register_farmer(client)
    resp = _register_farmer(client, name="Someone Else")
    assert resp.status_code == 409
    assert resp.json() == {"status": "error", "code": "conflict", "message": "Email already registered"}
    assert db.query(Farmer).count() == 1


def test_register_farmer_rejects_bad_email(client):
    resp = _register_farmer(client, email="not-an-email")
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"


def test_farmer_login(client):
    farmer_id = _register_farmer(client).json()["id"]

    ok = client.post("/farmers/login", json={"email": "ravi@example.com", "password": "s3cret"})
    assert ok.status_code == 200
    assert ok.json()["farmer_id"] == farmer_id
    assert ok.json()["farmer_name"] == "Ravi Kumar"

    bad = client.post("/farmers/login", json={"email": "ravi@example.com", "password": "wrong"})
    assert bad.status_code == 401
    assert bad.json()["code"] == "authentication_failed"


def test_farmer_qr_artifact(client, image_file):
    with_qr = _register_farmer(client, image_file=image_file).json()
    without_qr = _register_farmer(client, email="other@example.com").json()

    resp = client.get(f"/farmers/{with_qr['id']}/qr")
    assert resp.status_code == 200
    assert resp.json()["qr_url"].endswith("-upi.png")
    assert client.get(resp.json()["qr_url"]).status_code == 200

    assert client.get(f"/farmers/{without_qr['id']}/qr").status_code == 404


def test_registration_losing_email_race_removes_uploads(client, db, settings, image_file, monkeypatch):
    def unique_violation(self):
        raise IntegrityError("INSERT INTO farmers", {}, Exception("UNIQUE constraint failed: farmers.email"))

    monkeypatch.setattr(Session, "commit", unique_violation)
    resp = _register_farmer(client, image_file=image_file)

    assert resp.status_code == 409
    assert resp.json()["code"] == "conflict"
    assert db.query(Farmer).count() == 0
    assert [p for p in Path(settings.UPLOAD_DIR).iterdir() if p.is_file()] == []


def test_consumer_register_login_and_check_email(client):
    payload = {"name": "Meera", "email": "meera@example.com", "mobile": "9000000002", "password": "pw"}
    created = client.post("/consumers/register", json=payload)
    assert created.status_code == 201
    assert "hashed_password" not in created.json()

    assert client.post("/consumers/register", json=payload).status_code == 409
    assert client.post("/consumers/check-email", json={"email": "meera@example.com"}).json() == {"exists": True}
    assert client.post("/consumers/check-email", json={"email": "nobody@example.com"}).json() == {"exists": False}

    login = client.post("/consumers/login", json={"name": "Meera", "email": "meera@example.com", "password": "pw"})
    assert login.status_code == 200
    assert login.json()["consumer"]["id"] == created.json()["id"]

    wrong_name = client.post("/consumers/login", json={"name": "Mira", "email": "meera@example.com", "password": "pw"})
    assert wrong_name.status_code == 401
