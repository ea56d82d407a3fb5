"""Fixtures for API tests: an ASGI client over the test database and bearer tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable, Dict, Iterable

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from projects_service.server.core.config import settings

TEST_USERS: Dict[str, Dict] = {
    "admin": {"user_id": 40051333, "roles": ["Topcoder User", "administrator"]},
    "manager": {"user_id": 40051334, "roles": ["Topcoder User", "Connect Manager"]},
    "copilot": {"user_id": 40051332, "roles": ["Topcoder User", "Connect Copilot"]},
    "copilot_manager": {"user_id": 40051336, "roles": ["Topcoder User", "Connect Copilot Manager"]},
    "member": {"user_id": 40051331, "roles": ["Topcoder User"]},
    "outsider": {"user_id": 40051335, "roles": ["Topcoder User"]},
}


def make_user_token(user_id: int, roles: Iterable[str], email: str, handle: str, expires_in: int = 3600) -> str:
    ns = settings.auth.claim_namespace
    payload = {
        f"{ns}userId": str(user_id),
        f"{ns}roles": list(roles),
        f"{ns}handle": handle,
        f"{ns}email": email,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, settings.auth.secret, algorithm=settings.auth.algorithm)


def make_m2m_token(scopes: Iterable[str]) -> str:
    payload = {
        "gty": "client-credentials",
        "sub": "enjlyAcV8pFGUoWmm7BQeS5Gj5fJa@clients",
        "scope": " ".join(scopes),
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return jwt.encode(payload, settings.auth.secret, algorithm=settings.auth.algorithm)


@pytest.fixture
def users() -> Dict[str, Dict]:
    """Test users by name: ``user_id`` and Topcoder ``roles``."""
    return TEST_USERS


@pytest.fixture
def headers() -> Callable[[str], Dict[str, str]]:
    """Authorization headers for one of the test users."""

    def _headers(name: str) -> Dict[str, str]:
        user = TEST_USERS[name]
        token = make_user_token(user["user_id"], user["roles"], f"{name}@example.com", name)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def m2m_headers() -> Callable[..., Dict[str, str]]:
    def _headers(*scopes: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_m2m_token(scopes)}"}

    return _headers


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, bus) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with the test session and recording bus injected."""
    from projects_service.core.database import get_session
    from projects_service.events import get_event_bus
    from projects_service.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_event_bus] = lambda: bus

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_project(client: AsyncClient, headers):
    """Create a project through the API as the named user and return its content."""

    async def _create(owner: str = "member", **fields) -> Dict:
        body = {"name": "Demo project", "type": "app", **fields}
        response = await client.post("/v4/projects", json={"param": body}, headers=headers(owner))
        assert response.status_code == 201, response.text
        return response.json()["result"]["content"]

    return _create
