"""
Shared test fixtures — in-memory async SQLite DB, FastAPI test client, auth helpers.

Each test gets its own in-memory database so tests are fast, isolated, and
don't require Docker/PostgreSQL.
"""

from __future__ import annotations

import os
from typing import AsyncGenerator, Awaitable, Callable

# ── Environment BEFORE any smartsupply imports ───────────
# The signing secret is mandatory and argon2 defaults are far too slow for
# a test suite.
os.environ["JWT_SECRET_KEY"] = "test-only-signing-secret-0123456789abcdef"
os.environ["JWT_EXPIRES_IN"] = "7d"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["ARGON2_PARALLELISM"] = "1"

import pytest_asyncio                                   # noqa: E402
from sqlalchemy import event as _sa_event               # noqa: E402
from httpx import ASGITransport, AsyncClient            # noqa: E402
from sqlalchemy.ext.asyncio import (                    # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool                  # noqa: E402

from smartsupply.database import create_tables, get_db  # noqa: E402
from smartsupply.main import create_app                 # noqa: E402


# ── Database lifecycle ──────────────────────────────────

@pytest_asyncio.fixture()
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """A private in-memory database with all tables created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; take over
    # transaction control so begin_nested() behaves as on PostgreSQL.
    @_sa_event.listens_for(test_engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None

    @_sa_event.listens_for(test_engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session on the test database, for direct service-level tests."""
    async with session_factory() as session:
        yield session


# ── HTTP client fixture ─────────────────────────────────

@pytest_asyncio.fixture()
async def app_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an ``httpx.AsyncClient`` wired to the FastAPI app with the DB
    dependency overridden to use the test database.
    """

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ── Auth helper fixtures ────────────────────────────────

TEST_USER = {
    "email": "test@example.com",
    "password": "testpass123",
    "first_name": "Test",
    "last_name": "User",
    "role": "MANAGER",
}


@pytest_asyncio.fixture()
async def registered_user(app_client: AsyncClient) -> dict:
    """Register the default test user and return the user data + password."""
    resp = await app_client.post("/auth/register", json=TEST_USER)
    assert resp.status_code == 201, resp.text
    return {**resp.json(), "password": TEST_USER["password"]}


@pytest_asyncio.fixture()
async def auth_token(app_client: AsyncClient, registered_user: dict) -> str:
    """Login and return a valid access token."""
    resp = await app_client.post("/auth/login", json={
        "email": TEST_USER["email"],
        "password": TEST_USER["password"],
    })
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


@pytest_asyncio.fixture()
async def auth_headers(auth_token: str) -> dict[str, str]:
    """Return Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture()
async def headers_for(app_client: AsyncClient) -> Callable[[str], Awaitable[dict[str, str]]]:
    """Factory: register a user with the given role and return bearer headers."""

    async def _headers_for(role: str) -> dict[str, str]:
        email = f"{role.lower()}@example.com"
        resp = await app_client.post("/auth/register", json={
            "email": email,
            "password": "rolepass123",
            "first_name": role.title(),
            "last_name": "Tester",
            "role": role,
        })
        assert resp.status_code == 201, resp.text
        resp = await app_client.post("/auth/login", json={
            "email": email,
            "password": "rolepass123",
        })
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _headers_for


def tamper_signature(token: str) -> str:
    """Change one character in the middle of the JWT signature segment."""
    header, body, signature = token.split(".")
    i = len(signature) // 2
    replacement = "A" if signature[i] != "A" else "B"
    return ".".join([header, body, signature[:i] + replacement + signature[i + 1:]])
