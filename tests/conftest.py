"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator
from typing import Any

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "test"
os.environ["ADMIN_API_KEY"] = "test-admin-key"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from formgate.config import settings
from formgate.database import get_engine, get_session, reset_schema_state
from formgate.main import app
from formgate.models import FormSubmission, FormToken

TEST_ADMIN_KEY = "test-admin-key"


def _serialize_sqlite_writes(engine: AsyncEngine) -> None:
    """Open every SQLite transaction with BEGIN IMMEDIATE.

    SQLite's deferred transactions deadlock when two connections upgrade to
    write locks at once; taking the write lock up front makes concurrent
    requests queue on the busy timeout instead, like row locks in PostgreSQL.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with fresh form tables."""
    engine = create_async_engine(
        settings.database_url_test,
        echo=False,
        poolclass=NullPool,
    )
    if engine.dialect.name == "sqlite":
        _serialize_sqlite_writes(engine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine.

    Tests open short-lived sessions from it so no connection holds a
    transaction open while the app is serving a request.
    """
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def client(
    test_engine: AsyncEngine,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client backed by the test database."""

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_engine] = lambda: test_engine
    reset_schema_state()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
    reset_schema_state()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Authorization headers carrying the admin key."""
    return {"Authorization": f"Bearer {TEST_ADMIN_KEY}"}


class GatewayClient:
    """Wrapper for AsyncClient that posts actions to the gateway."""

    def __init__(self, client: AsyncClient, headers: dict[str, str]):
        self.client = client
        self.headers = headers

    async def post(self, url: str, **kwargs: Any) -> Any:
        kwargs.setdefault("headers", {}).update(self.headers)
        return await self.client.post(url, **kwargs)

    async def action(self, action: str, **fields: Any) -> Any:
        return await self.post("/api/app", json={"action": action, **fields})


@pytest.fixture
def gateway(client: AsyncClient, auth_headers: dict[str, str]) -> GatewayClient:
    """Create an authenticated gateway client."""
    return GatewayClient(client, auth_headers)


@pytest.fixture
async def form_token(session_factory: async_sessionmaker[AsyncSession]) -> FormToken:
    """Create an unused form token."""
    async with session_factory() as session:
        form_token = FormToken(token="ABCDEFGHJKLMNPQRSTUVWXYZ", guild_id="g1", user_id="u1")
        session.add(form_token)
        await session.commit()
    return form_token


async def add_submission(
    session_factory: async_sessionmaker[AsyncSession],
    **overrides: Any,
) -> FormSubmission:
    """Insert a submission directly, bypassing token consumption."""
    values: dict[str, Any] = {
        "guild_id": "g1",
        "user_id": "u1",
        "nick": "Ana",
        "idade": 21,
        "motivo": "quero entrar",
        "link_bonde": "http://example.com/bonde",
    }
    values.update(overrides)
    async with session_factory() as session:
        submission = FormSubmission(**values)
        session.add(submission)
        await session.commit()
    return submission


@pytest.fixture
async def submission(session_factory: async_sessionmaker[AsyncSession]) -> FormSubmission:
    """Create a pending, unlogged submission."""
    return await add_submission(session_factory)


async def fetch_token(session_factory: async_sessionmaker[AsyncSession], token: str) -> FormToken | None:
    """Read a token's current row in a fresh session."""
    async with session_factory() as session:
        return await session.get(FormToken, token)


async def fetch_submission(
    session_factory: async_sessionmaker[AsyncSession],
    submission_id: int,
) -> FormSubmission | None:
    """Read a submission's current row in a fresh session."""
    async with session_factory() as session:
        return await session.get(FormSubmission, submission_id)
