# tests/conftest.py
from types import SimpleNamespace
from unittest.mock import MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient

from careercraft.core.config import Settings
from careercraft.db.mongodb import get_mongo_db, init_mongo_indexes
from careercraft.main import app
from careercraft.services.ai_client import AIClient, get_ai_client
from careercraft.services.storage import ResumeStorage, get_resume_storage

API = "/api/v1"


def completion(text, finish_reason="stop"):
    """Shape of an openai ChatCompletion, as far as AIClient reads it."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text), finish_reason=finish_reason)]
    )


@pytest.fixture
def db():
    """Fresh in-memory database with the production indexes."""
    database = mongomock.MongoClient()["careercraft_test"]
    init_mongo_indexes(database)
    return database


@pytest.fixture
def openai_backend():
    """Stands in for the openai.OpenAI client; tests set the completion they need."""
    backend = MagicMock()
    backend.chat.completions.create.return_value = completion("OK")
    return backend


@pytest.fixture
def storage(tmp_path):
    settings = Settings(storage_backend="local", local_upload_dir=str(tmp_path / "uploads"))
    return ResumeStorage(settings=settings)


@pytest.fixture
def make_client(db, openai_backend, storage):
    """Each call returns a TestClient with its own cookie jar (one per logged-in user)."""
    app.dependency_overrides[get_mongo_db] = lambda: db
    app.dependency_overrides[get_ai_client] = lambda: AIClient(client=openai_backend, model="test-model")
    app.dependency_overrides[get_resume_storage] = lambda: storage
    yield lambda: TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def register(make_client):
    """register(role, email, **fields) -> (client, user_json) for a fresh, logged-in user."""
    def _register(role="seeker", email=None, full_name="Test User", password="secret123", company_name="Acme Corp"):
        c = make_client()
        email = email or f"{role}-{id(c)}@example.com"
        body = {"fullName": full_name, "email": email, "password": password}
        if role == "company_recruiter":
            body["companyName"] = company_name
            r = c.post(f"{API}/auth/register-recruiter", json=body)
        else:
            r = c.post(f"{API}/auth/register", json=body)
        assert r.status_code == 201, r.text
        return c, r.json()
    return _register


@pytest.fixture
def seeker(register):
    return register("seeker", email="seeker@example.com", full_name="Sam Seeker")


@pytest.fixture
def recruiter(register):
    return register("company_recruiter", email="recruiter@example.com", full_name="Rita Recruiter")


@pytest.fixture
def give_resume(db):
    """Put a resume reference on a user's profile without going through upload."""
    def _give(email, url="https://files.example.com/resumes/cv.pdf", file_name="cv.pdf"):
        db.users.update_one({"email": email}, {"$set": {"resume_url": url, "resume_file_name": file_name}})
    return _give


def job_payload(**overrides):
    payload = {
        "title": "Backend Engineer",
        "description": "Build and run Python services.",
        "location": "Bangalore",
        "jobType": "Full-time",
        "category": "Engineering",
        "skillsRequired": ["Python", "MongoDB"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def post_job():
    def _post(client, **overrides):
        r = client.post(f"{API}/jobs", json=job_payload(**overrides))
        assert r.status_code == 201, r.text
        return r.json()
    return _post
