# tests/conftest.py
import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from app.core.config import Settings, get_settings
from app.db import mongo
from app.main import app

TEST_SECRET = "test-secret"

JOB_PAYLOAD = {
    "title": "Backend Engineer",
    "company": "Acme",
    "location": "Berlin",
    "type": "Full-time",
    "description": "Build and run the public API",
    "requirements": "Python, MongoDB",
    "salary": {"min": 50000, "max": 70000},
    "skills": ["python", "mongodb"],
}


@pytest.fixture(autouse=True)
def mock_mongo(monkeypatch):
    """Every test gets a fresh in-memory Mongo behind the motor client."""
    client = AsyncMongoMockClient()
    monkeypatch.setattr(mongo, "_mongo_client", client)
    yield client


@pytest.fixture
def settings():
    return Settings(JWT_SECRET=TEST_SECRET, _env_file=None)


@pytest.fixture(autouse=True)
def override_settings(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def register_user(client):
    """Register a user and return (user_id, auth headers). Cookies are dropped."""
    async def _register(name="Alice", email="alice@example.com", password="secret1"):
        r = await client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        assert r.status_code == 201, r.text
        client.cookies.clear()
        body = r.json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}
    return _register


@pytest.fixture
def create_community(client):
    async def _create(headers, name="Pythonistas", description="All things Python"):
        r = await client.post("/api/community", json={"name": name, "description": description}, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()["data"]["id"]
    return _create


@pytest.fixture
def job_payload():
    return dict(JOB_PAYLOAD)


@pytest.fixture
def create_job(client):
    async def _create(headers, **overrides):
        r = await client.post("/api/job", json={**JOB_PAYLOAD, **overrides}, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()["data"]["id"]
    return _create
