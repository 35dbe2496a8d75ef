"""Shared fixtures.

The environment is set before anything from `app` is imported so the
cached settings, the engine and the cipher all pick up the test values.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="lapor-warga-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["ENC_KEY"] = "0123456789abcdef0123456789abcdef"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ROOT_USERNAME"] = "root"
os.environ["ROOT_PASSWORD"] = "root-password"
os.environ["ROOT_EMAIL"] = "root@laporwarga.test"
os.environ["ROOT_FULLNAME"] = "Root Admin"
os.environ["MOBILE_KEY"] = "mobile-test-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["AUDIT_WORKERS"] = "1"

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.infrastructure.database import Base, SessionLocal, engine
from app.interfaces.deps import build_user_service, get_task_queue

API = "/api/v1"
MOBILE_HEADERS = {"X-Mobile-Key": "mobile-test-key"}


@pytest.fixture
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def task_queue():
    tasks = get_task_queue()
    tasks.start()
    yield tasks
    tasks.stop()


@pytest.fixture
def db(reset_db, task_queue):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_service(db):
    service = build_user_service(db)
    service.resolve_role("citizen")
    return service


@pytest.fixture
def client(reset_db):
    with TestClient(app) as test_client:
        yield test_client


def drain():
    """Wait for queued audit writes and last-login bumps."""
    get_task_queue().join()


def login(client, identifier, password, mobile=False):
    path = f"{API}/m/auth/login" if mobile else f"{API}/auth/login"
    headers = MOBILE_HEADERS if mobile else {}
    response = client.post(path, json={"identifier": identifier, "password": password}, headers=headers)
    # keep tests explicit about which credentials they send
    client.cookies.clear()
    return response


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    response = login(client, "root", "root-password")
    assert response.status_code == 200, response.text
    return bearer(response.json()["data"]["token"])


@pytest.fixture
def create_user(client, admin_headers):
    def _create(username, email, password="password123", role=None, **extra):
        payload = {
            "username": username,
            "email": email,
            "fullname": extra.pop("fullname", f"{username.title()} Warga"),
            "password": password,
            **extra,
        }
        if role:
            payload["role"] = role
        return client.post(f"{API}/users/create", json=payload, headers=admin_headers)

    return _create
