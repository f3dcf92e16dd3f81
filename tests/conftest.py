"""
Pytest configuration and fixtures.
"""

import json
import os
import tempfile
import uuid
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

# Configure the app before it is imported anywhere
_TEST_DIR = tempfile.mkdtemp(prefix="image-studio-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_TEST_DIR) / 'test.db'}"
os.environ["AI_GATEWAY_API_KEY"] = "test-gateway-key"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LEGACY_ERROR_STATUS"] = "true"

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.services.image_adapter import image_adapter  # noqa: E402


class FakeProvider:
    """Stand-in for the AI gateway. Set ``status_code``/``body`` and inspect ``requests``."""

    def __init__(self):
        self.status_code = 200
        self.body: dict | str = image_list_response("https://x/img.png")
        self.requests: list[httpx.Request] = []

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)


def image_list_response(url: str, content: str = "Here is your image") -> dict:
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": content,
                    "images": [{"type": "image_url", "image_url": {"url": url}}],
                }
            }
        ]
    }


@pytest.fixture
def provider():
    """Route every adapter call to a FakeProvider."""
    fake = FakeProvider()
    with patch.object(image_adapter, "transport", httpx.MockTransport(fake.handle)):
        yield fake


@pytest.fixture
def client():
    """Create a test client (runs startup, which creates the tables)."""
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, full_name: str | None = None) -> dict:
    """Sign up a fresh user and return its bearer headers."""
    email = f"user-{uuid.uuid4().hex[:12]}@example.com"
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": "secret123", "full_name": full_name},
    )
    assert response.status_code == 201, response.text

    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": "secret123"},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register(client)
