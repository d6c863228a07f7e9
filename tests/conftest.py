# tests/conftest.py
"""
Pytest configuration and fixtures for the SprintOps test suite.

Provides:
- A fresh SQLite database per test (aiosqlite, NullPool)
- An httpx AsyncClient wired to the FastAPI app with get_db overridden
- Account helpers that sign up / log in through the public API
"""

import os
from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Set test environment before imports
os.environ["ENVIRONMENT"] = "testing"

from sprintops.main import app
from sprintops.database import get_db
from sprintops.models import Base

API = "/api/v1"


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'sprintops.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def login(client: AsyncClient, email: str, password: str) -> Dict[str, Any]:
    response = await client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return {
        "user": body["user"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
    }


@pytest.fixture
def make_account(client):
    """Sign up a new team admin and return their user payload and auth headers."""

    async def _make(email: str, name: str = "Alex Chen", team_name: Optional[str] = None):
        payload = {"name": name, "email": email, "password": "correct-horse"}
        if team_name is not None:
            payload["team_name"] = team_name

        response = await client.post(f"{API}/auth/signup", json=payload)
        assert response.status_code == 201, response.text

        return await login(client, email, "correct-horse")

    return _make


@pytest.fixture
def make_member(client):
    """Have an admin add a member, then log in as that member."""

    async def _make(admin: Dict[str, Any], email: str, name: str = "Sarah Miller", role: str = "MEMBER"):
        response = await client.post(
            f"{API}/team",
            json={"name": name, "email": email, "role": role},
            headers=admin["headers"],
        )
        assert response.status_code == 201, response.text

        return await login(client, email, response.json()["temp_password"])

    return _make


@pytest_asyncio.fixture
async def admin(make_account):
    return await make_account("alex@sprintops.com", team_name="Core Team")


@pytest_asyncio.fixture
async def rival(make_account):
    return await make_account("rival@rivals.io", name="Riley Rival", team_name="Rivals")
