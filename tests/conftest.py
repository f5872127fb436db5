import itertools
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="campus-recruit-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEFAULT_ADMIN"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

import pytest
from fastapi.testclient import TestClient

from campus_recruit.db.postgres import engine
from campus_recruit.db.tables import metadata
from campus_recruit.main import create_app
from campus_recruit.services import user_service

API = "/api/v1"

_emails = itertools.count(1)


@pytest.fixture(autouse=True)
def reset_db() -> None:
    metadata.drop_all(bind=engine)
    metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(client):
    """Create a user of any role directly, then log in through the API."""

    def _make(role: str = "student", email: str = None, password: str = "secret123", **fields):
        email = email or f"{role}{next(_emails)}@example.com"
        user_service.create_user({
            "email": email,
            "password": password,
            "first_name": fields.get("first_name", role.title()),
            "last_name": fields.get("last_name", "User"),
            "role": role,
            "is_active": True,
        })
        resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        return data["user"], auth_header(data["token"])

    return _make


def job_body(**overrides) -> dict:
    body = {
        "title": "Backend Engineer",
        "description": "Build and run the placement APIs.",
        "requirements": "Solid fundamentals and clear communication.",
        "location": "Bengaluru",
        "salary_min": 50000,
        "salary_max": 80000,
        "job_type": "full_time",
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_job(client):
    def _make(headers: dict, **overrides) -> dict:
        resp = client.post(f"{API}/jobs", json=job_body(**overrides), headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]["job"]

    return _make
