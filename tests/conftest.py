"""Shared fixtures: a scripted inventory backend and an authenticated API client."""

import json
import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-inventory-portal-0123456789")
os.environ.setdefault("BACKEND_URL", "http://backend.test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_DIR", "")

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.backend import BackendClient, get_backend_client
from app.core.security import create_session_token
from app.models.user import SessionUser


class FakeBackend:
    """Answers requests from a table of ``(method, path) -> (status, body)``.

    A ``str`` body is sent as raw text, anything else as JSON. Unknown routes
    answer 404. Every request is recorded in ``calls``.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def add(self, method, path, body=None, status_code=200):
        self.routes[(method, path)] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, request.url.path, body))

        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if isinstance(route, Exception):
            raise route

        status_code, payload = route
        if isinstance(payload, str):
            return httpx.Response(status_code, text=payload)
        return httpx.Response(status_code, json=payload)

    def fail(self, method, path, exc=None):
        self.routes[(method, path)] = exc or httpx.ConnectError("connection refused")

    def client(self) -> BackendClient:
        return BackendClient("http://backend.test", transport=httpx.MockTransport(self.handler))

    def requested(self, method=None):
        return [(m, p) for m, p, _ in self.calls if method is None or m == method]

    def posted(self, path):
        return [body for m, p, body in self.calls if m == "POST" and p == path]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def app(backend):
    from main import app as fastapi_app

    fastapi_app.dependency_overrides[get_backend_client] = backend.client
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def api(app):
    return TestClient(app)


def auth_headers(role="admin", **fields):
    session = SessionUser(
        id=fields.get("id", f"{role}-1"),
        name=fields.get("name", f"Test {role.title()}"),
        email=fields.get("email", f"{role}@pstu.ac.bd"),
        role=role,
        department_id=fields.get("department_id"),
        office_id=fields.get("office_id"),
    )
    return {"Authorization": f"Bearer {create_session_token(session)}"}


@pytest.fixture
def admin_headers():
    return auth_headers("admin")
