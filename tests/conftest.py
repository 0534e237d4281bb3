"""
Pytest configuration and shared fixtures.

Fixtures available to all tests:
  • memory_cache           - fresh in-memory cache backend (autouse)
  • backend                - fake backend; every resource method is an AsyncMock
  • session_token(role)    - signed portal session token for a role
  • auth_headers(role)     - Bearer header carrying that token
  • client                 - FastAPI TestClient over portal.app
"""

from __future__ import annotations

import os
import sys
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

# Ensure the project root is on the path so all portal imports resolve.
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from portal import cache_backend, config  # noqa: E402
from portal.api import resources  # noqa: E402
from portal.auth import create_token  # noqa: E402

RESOURCE_GROUPS = (
    "auth", "intake", "public", "entrepreneur", "investor", "admin", "shares",
    "library", "expenses", "employees", "payroll",
)


class FakeBackend:
    """Stands in for :class:`portal.api.resources.Backend`."""

    def __init__(self) -> None:
        for group in RESOURCE_GROUPS:
            setattr(self, group, AsyncMock())

    async def aclose(self) -> None:
        return None


# ---------------------------------------------------------------------------
# Cache and backend
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def memory_cache(monkeypatch):
    monkeypatch.setattr(config, "REDIS_URL", "")
    cache_backend.reset_cache_backend_for_tests()
    yield cache_backend.get_cache_backend()
    cache_backend.reset_cache_backend_for_tests()


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(resources, "_backend_singleton", fake)
    return fake


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

def make_user(role: str = "admin", **extra) -> dict:
    return {
        "_id": f"{role}-1",
        "name": f"{role.title()} User",
        "email": f"{role}@example.com",
        "role": role,
        **extra,
    }


@pytest.fixture
def session_token():
    def _factory(role: str = "admin", **extra) -> str:
        return create_token(make_user(role, **extra), f"jwt-{role}", session_id=f"sid-{role}")
    return _factory


@pytest.fixture
def auth_headers(session_token):
    def _factory(role: str = "admin", **extra) -> dict:
        return {"Authorization": f"Bearer {session_token(role, **extra)}"}
    return _factory


@pytest.fixture
def client(backend):
    from portal.app import app
    return TestClient(app)
