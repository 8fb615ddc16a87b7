# tests/conftest.py
import io
import os
import tempfile

# must be in place before agridirect builds its engine and settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="agridirect-uploads-")
os.environ["BASE_URL"] = "http://testserver"

import pytest
from fastapi.testclient import TestClient

from agridirect.auth.security import get_password_hash
from agridirect.core.config import Settings, get_settings
from agridirect.db.init import drop_db, init_db
from agridirect.db.session import SessionLocal
from agridirect.main import create_app
from agridirect.models.farmer import Farmer
from agridirect.models.product import Product

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        BASE_URL="http://testserver",
        UPLOAD_DIR=tmp_path / "uploads",
    )


@pytest.fixture
def db():
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_db()


@pytest.fixture
def app(settings, db):
    application = create_app(settings)
    application.dependency_overrides[get_settings] = lambda: settings
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_farmer(db):
    """Insert a farmer directly; the password hash is computed once per test."""
    hashed = get_password_hash("secret")

    def _make(**overrides):
        fields = dict(
            name="Asha Patel",
            farm_name="Green Acres",
            location="Nashik",
            mobile="9000000001",
            experience=12,
            email=f"farmer{db.query(Farmer).count()}@example.com",
            hashed_password=hashed,
        )
        fields.update(overrides)
        farmer = Farmer(**fields)
        db.add(farmer)
        db.commit()
        db.refresh(farmer)
        return farmer

    return _make


@pytest.fixture
def farmer(make_farmer):
    return make_farmer()


@pytest.fixture
def make_product(db, farmer):
    def _make(**overrides):
        fields = dict(
            farmer_id=farmer.id,
            name="Basmati Rice",
            category="grain",
            price=100.0,
            quantity=50.0,
            location="Nashik, Maharashtra",
            image="/uploads/rice.png",
        )
        fields.update(overrides)
        product = Product(**fields)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def image_file():
    """Multipart file tuple factory for TestClient uploads."""
    def _file(name="tomato.png", content=PNG_BYTES):
        return (name, io.BytesIO(content), "image/png")

    return _file
