import os

os.environ.setdefault("DB_NAME", "exam_portal_test")
os.environ.setdefault("JWT_SECRET", "exam-portal-test-secret-with-enough-length")

import mongomock
import pytest
from fastapi.testclient import TestClient

from app import dependencies
from app.helpers.Database import MongoDB
from app.main import app

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"


@pytest.fixture(autouse=True)
def mongo():
    """Every test gets an empty in-memory database and fresh services."""
    MongoDB.client = mongomock.MongoClient()
    dependencies.cleanup_resources()
    yield MongoDB.client[os.environ["DB_NAME"]]
    dependencies.cleanup_resources()
    MongoDB.client = None


@pytest.fixture
def client():
    # No context manager: the startup hook (real MongoDB, scheduler) must not run.
    return TestClient(app)


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    dependencies.get_auth_service().ensure_admin(ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")
    response = client.post("/api/v1/auth/sign-in", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    return _bearer(response.json()["data"]["token"])


@pytest.fixture
def student_headers(client):
    response = client.post(
        "/api/v1/auth/sign-up",
        json={"email": "student@example.com", "password": "secret", "fullName": "Sam Student"},
    )
    return _bearer(response.json()["data"]["token"])


@pytest.fixture
def other_student_headers(client):
    response = client.post(
        "/api/v1/auth/sign-up",
        json={"email": "other@example.com", "password": "secret", "fullName": "Alex Other"},
    )
    return _bearer(response.json()["data"]["token"])


def sample_test_payload(duration=30):
    return {
        "title": "Aptitude Test",
        "description": "Basic aptitude",
        "durationMinutes": duration,
        "questions": [
            {
                "questionText": "2 + 2 = ?",
                "questionType": "mcq",
                "options": [
                    {"id": "1", "text": "3"},
                    {"id": "2", "text": "4"},
                    {"id": "3", "text": "5"},
                    {"id": "4", "text": "22"},
                ],
                "correctAnswers": ["2"],
                "marks": 3,
            },
            {
                "questionText": "Pick the primes",
                "questionType": "multiple_correct",
                "options": [
                    {"id": "1", "text": "2"},
                    {"id": "2", "text": "3"},
                    {"id": "3", "text": "4"},
                    {"id": "4", "text": "9"},
                ],
                "correctAnswers": ["1", "2"],
                "marks": 7,
            },
        ],
    }


@pytest.fixture
def active_test_id(client, admin_headers):
    """A published two-question test worth 10 marks."""
    response = client.post("/api/v1/tests/create", json=sample_test_payload(), headers=admin_headers)
    test_id = response.json()["data"]
    client.patch(f"/api/v1/tests/toggle-active/{test_id}", headers=admin_headers)
    return test_id


@pytest.fixture
def exam_payload():
    return sample_test_payload()
