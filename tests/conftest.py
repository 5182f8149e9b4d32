"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any ``bodymetrics`` import so the global
settings object is built with test values.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret-0123456789abcdef0123456789")
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from dataclasses import dataclass, field

import pytest
from fastapi.testclient import TestClient

from bodymetrics.adapters.email.base import AbstractEmailSender
from bodymetrics.core.app_factory import create_app
from bodymetrics.db.connection import Database

API_KEY = "test-api-key-123"


@dataclass
class RecordingEmailSender(AbstractEmailSender):
    """Email sender that keeps messages in memory instead of sending them."""

    sent: list[tuple[str, str]] = field(default_factory=list)

    async def send_password_reset(self, to: str, code: str) -> None:
        self.sent.append((to, code))


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def client(tmp_path, email_sender) -> TestClient:
    """TestClient over a fresh app and database; lifespan runs on enter."""
    app = create_app(database_path=tmp_path / "test.db", email_sender=email_sender)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {"X-API-Key": API_KEY}


@pytest.fixture
def auth_headers(client: TestClient, api_headers: dict[str, str]) -> dict[str, str]:
    """Headers for a freshly registered account (API key + bearer token)."""
    resp = client.post(
        "/api/v1/auth/register",
        json={"email": "owner@example.com", "password": "secret123"},
        headers=api_headers,
    )
    assert resp.status_code == 201
    return {**api_headers, "Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
async def tmp_db(tmp_path):
    """Migrated database for repository-level tests."""
    db = Database()
    await db.init(tmp_path / "repo.db")
    yield db
    await db.close()
