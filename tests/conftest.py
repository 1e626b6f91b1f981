"""
Shared fixtures.

Every test gets its own in-memory SQLite database; the ASGI app is driven
through httpx without a running server.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"

from typing import Any, Dict  # noqa: E402

import httpx  # noqa: E402
import pytest_asyncio  # noqa: E402

from database.session import (  # noqa: E402
    build_engine,
    build_session_factory,
    get_db_session,
    init_models,
)
from main import app  # noqa: E402

STRONG_PASSWORD = "Str0ng!Pass"


@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def _override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _override_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test/api/v1") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def register(client):
    """Register a user and return ``(auth_headers, user)``."""

    async def _register(email: str, name: str = "Test User", password: str = STRONG_PASSWORD):
        resp = await client.post(
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        body: Dict[str, Any] = resp.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _register
