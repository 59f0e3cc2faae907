import json
import os
import tempfile
from datetime import timedelta

# Point the app at a throwaway SQLite file before anything imports settings
_DB_DIR = tempfile.mkdtemp(prefix="placement-hub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["AI_GATEWAY_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert, update

from placement_hub.core.errors import AIGatewayUnavailable
from placement_hub.db.postgres import engine, get_db_session, utcnow
from placement_hub.db.tables import job_opportunities, metadata, new_id
from placement_hub.main import app
from placement_hub.services.ai_gateway_client import AIGatewayClient, set_ai_client


class FakeAIClient(AIGatewayClient):
    """
    Gateway stand-in. Queue replies in `responses`: a dict/list is sent back
    as JSON, a str as-is, an exception is raised, and a callable gets
    (system_prompt, user_content) and returns one of those. An empty queue
    behaves like an unreachable gateway.
    """

    def __init__(self, responses=None):
        super().__init__(api_key="test-key", base_url="http://gateway.invalid/v1", model="test-model")
        self.responses = list(responses or [])
        self.calls = []

    def chat(self, system_prompt, user_content, temperature=None, max_tokens=None):
        self.calls.append({"system": system_prompt, "user": user_content})
        if not self.responses:
            raise AIGatewayUnavailable(AIGatewayUnavailable.NETWORK_ERROR)
        reply = self.responses.pop(0)
        if callable(reply):
            reply = reply(system_prompt, user_content)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return reply
        return json.dumps(reply)


@pytest.fixture(autouse=True)
def db():
    metadata.drop_all(engine)
    metadata.create_all(engine)
    yield
    metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def ai():
    fake = FakeAIClient()
    set_ai_client(fake)
    yield fake
    set_ai_client(None)


@pytest.fixture
def client():
    return TestClient(app)


def register(client, email, role="student", full_name="Asha Verma", password="secret123"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "full_name": full_name, "role": role},
    )
    assert response.status_code == 201, response.text
    login = client.post("/api/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    body = login.json()
    return {"Authorization": f"Bearer {body['access_token']}"}, body["user_id"]


@pytest.fixture
def student(client):
    return register(client, "asha@campus.edu")


@pytest.fixture
def recruiter(client):
    return register(client, "ravi@acme-hiring.com", role="recruiter", full_name="Ravi Menon")


@pytest.fixture
def mentor(client):
    return register(client, "meera@campus.edu", role="mentor", full_name="Meera Iyer")


@pytest.fixture
def tnp(client):
    return register(client, "tnp.office@campus.edu", role="tnp", full_name="TnP Office")


def insert_job(posted_by, days_old=0, **fields):
    """Write a job row directly, with created_at pushed back by days_old."""
    created = utcnow() - timedelta(days=days_old)
    row = {
        "id": new_id(),
        "posted_by": posted_by,
        "title": "Backend Intern",
        "company_name": "Acme",
        "job_type": "internship",
        "location_type": "remote",
        "description": "",
        "required_skills": [],
        "preferred_skills": [],
        "status": "active",
        "created_at": created,
        "updated_at": created,
    }
    row.update(fields)
    with get_db_session() as session:
        session.execute(insert(job_opportunities).values(**row))
    return row["id"]


def set_job_status(job_id, status):
    with get_db_session() as session:
        session.execute(update(job_opportunities).where(job_opportunities.c.id == job_id).values(status=status))
