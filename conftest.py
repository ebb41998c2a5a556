"""Shared fixtures: an in-memory store, a scripted narrative client and auth headers."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from app import app
from core.genai_client import NarrativeClient, NarrativeResult, get_narrative_client
from database.repository import InMemoryRepository, get_repository
from services.auth_service import create_jwt_token


class FakeNarrativeClient(NarrativeClient):
    """Returns a canned result, or raises, and records every prompt."""

    def __init__(self, result=None, raises=None):
        self.result = result or NarrativeResult.failure("network unreachable")
        self.raises = raises
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.raises:
            raise self.raises
        return self.result


def months_ago(months: int) -> str:
    """ISO hire date roughly `months` whole months before today."""
    return (date.today() - timedelta(days=int(months * 30.5) + 3)).isoformat()


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def narrative_client():
    return FakeNarrativeClient()


@pytest.fixture
def client(repository, narrative_client):
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_narrative_client] = lambda: narrative_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def editor_headers():
    token = create_jwt_token({
        "user_id": "HR001",
        "email": "editor@example.com",
        "full_name": "HR Editor",
        "role": "hr_admin",
        "can_edit_employees": True,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def viewer_headers():
    token = create_jwt_token({
        "user_id": "HR002",
        "email": "viewer@example.com",
        "full_name": "HR Viewer",
        "role": "viewer",
        "can_edit_employees": False,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def add_employee(repository):
    """Insert an employee row directly and return it."""
    def _add(role="Analyst", department="Engineering", tenure_months=24, **fields):
        row = {
            "first_name": "Test",
            "last_name": "Employee",
            "role": role,
            "department": department,
            "hire_date": months_ago(tenure_months),
            "tenure_months": tenure_months,
            "is_key_talent": False,
        }
        row.update(fields)
        return repository.insert("employees", row)
    return _add
