import os

#before any shop import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from shop.api import create_app
from shop.api.deps import get_storage
from shop.data.database import Base, engine, SessionLocal
import shop.data.models  # noqa: F401

STRONG_PASSWORD = "Secret#123"


class FakeStorage:
    def __init__(self):
        self.uploads = []

    def upload(self, photo):
        self.uploads.append(photo)
        return f"https://cdn.example.com/{photo.filename}"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def client(storage):
    app = create_app()
    app.dependency_overrides[get_storage] = lambda: storage
    return TestClient(app)


def register(client, email, role="user", address="1 Main St", password=STRONG_PASSWORD):
    resp = client.post(
        "/api/v1/auth/register",
        json={
            "name": email.split("@")[0],
            "email": email,
            "password": password,
            "phone": "555-0100",
            "address": address,
            "answer": "blue",
            "role": role,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def login_headers(client, email, password=STRONG_PASSWORD):
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def admin(client):
    register(client, "admin@example.com", role="admin")
    return login_headers(client, "admin@example.com")


@pytest.fixture
def other_admin(client):
    register(client, "admin2@example.com", role="admin")
    return login_headers(client, "admin2@example.com")


@pytest.fixture
def shopper(client):
    register(client, "buyer@example.com")
    return login_headers(client, "buyer@example.com")


@pytest.fixture
def make_category(client, admin):
    def _make(name="Shoes", headers=None):
        resp = client.post(
            "/api/v1/category/create-category",
            json={"name": name},
            headers=headers or admin,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_product(client, admin, make_category):
    def _make(name="Red Shoe", price="20", quantity=10, category_id=None, headers=None, files=None):
        if category_id is None:
            category_id = make_category(f"Cat for {name}", headers=headers)["id"]
        resp = client.post(
            "/api/v1/product/create-product",
            data={
                "name": name,
                "description": f"{name} description",
                "price": price,
                "category": str(category_id),
                "quantity": str(quantity),
            },
            files=files,
            headers=headers or admin,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
