import base64
import json
import os
import tempfile

# Settings are read at import time, so the test database must be configured first
_db_dir = tempfile.mkdtemp(prefix="fintrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.sqlite')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["AUTH0_DOMAIN"] = ""
os.environ["AUTH0_AUDIENCE"] = ""

import pytest
from fastapi.testclient import TestClient

from fintrack.database import Base, SessionLocal, engine
from fintrack.main import app
from fintrack.schemas import RegisterRequest
from fintrack.services.catalog import seed_default_catalog
from fintrack.services.users import register_user


@pytest.fixture()
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    seed_default_catalog(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def user_id(db):
    user = register_user(db, RegisterRequest(email="owner@example.com", password="password123"))
    return user.id


@pytest.fixture()
def client(db):
    # Not entered as a context manager: tables and catalog come from the db fixture
    return TestClient(app)


def register(client, email="user1@example.com", password="password123"):
    return client.post("/api/auth/register", json={"email": email, "password": password})


@pytest.fixture()
def auth_headers(client):
    response = register(client)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def _b64(data):
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


@pytest.fixture()
def rs256_token():
    """Token whose header claims RS256 like an identity-provider token; the signature is a placeholder"""
    return ".".join([
        _b64({"alg": "RS256", "typ": "JWT", "kid": "test-key"}),
        _b64({"sub": "auth0|123"}),
        base64.urlsafe_b64encode(b"signature").rstrip(b"=").decode(),
    ])
