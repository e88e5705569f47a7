"""Shared fixtures.

The app module reads its configuration at import time, so the environment
is pointed at an in-memory database and a throwaway storage directory
before anything imports it.
"""

import os
import tempfile
from io import BytesIO

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["STORAGE_DIR"] = tempfile.mkdtemp(prefix="aruvi-storage-")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ADMIN_EMAIL"] = "admin@sriaruvi.test"
os.environ.pop("ADMIN_PASSWORD", None)

ADMIN_EMAIL = "admin@sriaruvi.test"
ADMIN_PASSWORD = "admin-pass-123"


def make_image_bytes(width, height, fmt="PNG", color=(200, 30, 30)):
    """Encode a solid-colour image in memory."""
    mode = "RGBA" if fmt == "PNG" else "RGB"
    fill = color + (255,) if mode == "RGBA" else color
    buf = BytesIO()
    Image.new(mode, (width, height), fill).save(buf, fmt)
    return buf.getvalue()


def make_upload(width=100, height=100, filename="photo.png", content_type="image/png", data=None):
    """A werkzeug FileStorage like the ones in request.files."""
    if data is None:
        data = make_image_bytes(width, height)
    return FileStorage(stream=BytesIO(data), filename=filename, content_type=content_type)


@pytest.fixture
def flask_app(tmp_path, monkeypatch):
    """App with fresh tables and an empty storage bucket per test."""
    import app as app_module
    from object_storage import LocalObjectStorage

    app_module.app.config.update(TESTING=True)
    monkeypatch.setattr(app_module, "storage", LocalObjectStorage(str(tmp_path), bucket="product-images"))

    with app_module.app.app_context():
        app_module.db.drop_all()
        app_module.db.create_all()
        yield app_module.app
        app_module.db.session.remove()
        app_module.db.drop_all()


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def admin_user(flask_app):
    from werkzeug.security import generate_password_hash
    from app import db, User

    user = User(
        email=ADMIN_EMAIL,
        name="Store Admin",
        password_hash=generate_password_hash(ADMIN_PASSWORD),
        is_admin=True,
    )
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_client(client, admin_user):
    """Test client logged in as the admin."""
    resp = client.post("/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return client


@pytest.fixture
def make_product(flask_app):
    """Insert a product straight into the table."""
    from app import db, Product

    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        values = {
            "section": "electronics",
            "slug": f"product-{counter['n']}",
            "title": f"Product {counter['n']}",
            "category": "Laptops",
            "price": 1000.0,
            "images": ["https://cdn.example.com/p.jpg"],
            "availability": True,
        }
        values.update(fields)
        product = Product(**values)
        db.session.add(product)
        db.session.commit()
        return product

    return _make
