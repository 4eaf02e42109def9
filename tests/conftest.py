import os
import sys
import tempfile
import uuid

import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Point the app at a throwaway SQLite file before database.py builds its engine
TEST_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="trainr_test_"), "test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.pop("STRIPE_SECRET_KEY", None)
os.environ.pop("GEMINI_API_KEY", None)

from fastapi.testclient import TestClient

from database import Base, engine
import models_orm  # noqa: F401
from main import app
from seed_data import seed_system_data


@pytest.fixture(autouse=True)
def fresh_db(monkeypatch):
    """Every test starts from empty tables plus the system seed data."""
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    seed_system_data()
    yield


@pytest.fixture
def api():
    return TestClient(app)


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def register(api, role, name=None, password="secret123", phone="555-0100"):
    name = name or f"{role.title()} {uuid.uuid4().hex[:6]}"
    payload = {
        "name": name,
        "email": f"{uuid.uuid4().hex[:10]}@example.com",
        "password": password,
        "role": role,
    }
    if role == "trainer":
        payload["phoneNumber"] = phone
    response = api.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "id": body["user"]["id"],
        "name": name,
        "email": payload["email"],
        "password": password,
        "headers": auth_headers(body["token"]),
    }


def add_client(api, trainer, name=None):
    """A client account created by the trainer, so it is already linked."""
    name = name or f"Client {uuid.uuid4().hex[:6]}"
    email = f"{uuid.uuid4().hex[:10]}@example.com"
    response = api.post("/api/trainer/clients", json={
        "name": name, "email": email, "password": "secret123"
    }, headers=trainer["headers"])
    assert response.status_code == 201, response.text
    login = api.post("/api/auth/login", json={"email": email, "password": "secret123"})
    assert login.status_code == 200, login.text
    return {
        "id": response.json()["client"]["id"],
        "name": name,
        "email": email,
        "headers": auth_headers(login.json()["token"]),
    }


@pytest.fixture
def trainer(api):
    return register(api, "trainer", name="Tara Trainer")


@pytest.fixture
def other_trainer(api):
    return register(api, "trainer", name="Otto Other")


@pytest.fixture
def client_user(api):
    """A self-registered client with no trainer yet."""
    return register(api, "client", name="Casey Client")


@pytest.fixture
def linked_client(api, trainer):
    return add_client(api, trainer, name="Lena Linked")
