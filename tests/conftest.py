import os
import tempfile

# Configure the app for an in-memory database before anything imports settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="cafe-uploads-")

import pytest
from fastapi.testclient import TestClient

from cafe_api import crud
from cafe_api.database import Base, get_engine, get_session_local
from cafe_api.main import app
from cafe_api.services.notification_outbox import NotificationOutbox


@pytest.fixture(autouse=True)
def reset_tables():
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = get_session_local()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def outbox():
    return NotificationOutbox()


@pytest.fixture
def make_user(client):
    """Register and log in a user over HTTP; returns (user_id, auth headers)."""
    counter = {"n": 0}

    def _make(name=None, password="secret123"):
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        email = f"{name.lower()}{counter['n']}@example.com"
        resp = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}

    return _make


@pytest.fixture
def make_cafe(db):
    def _make(name="Blue Bottle", **kwargs):
        return crud.create_cafe(db, name=name, **kwargs).id

    return _make


@pytest.fixture
def make_db_user(db):
    """Create a user directly through the service layer; returns the ORM row."""
    def _make(name):
        return crud.register_user(db, name, f"{name.lower()}@example.com", "pw", rounds=4)

    return _make


@pytest.fixture
def app_authenticator():
    return app.state.authenticator
