# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from speednet.api.deps import get_session_cache
from speednet.core.authorization import AuthContext
from speednet.core.cache import SessionCache
from speednet.core.db import Base, get_db, get_session_factory
from speednet.main import create_app

# Import all models so every table is registered on Base.metadata
from speednet.models import BusinessCard, NetworkingSession, SessionRotation, SessionSignup  # noqa: F401
from speednet.services.business_cards import BusinessCardService
from speednet.services.networking_sessions import NetworkingSessionService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Fresh in-memory database per test. StaticPool keeps every session on one connection."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Session for factories and direct assertions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache() -> SessionCache:
    return SessionCache()


@pytest.fixture
def session_service(session_factory, cache) -> NetworkingSessionService:
    return NetworkingSessionService(session_factory, cache)


@pytest.fixture
def card_service(session_factory) -> BusinessCardService:
    return BusinessCardService(session_factory)


@pytest.fixture
def ctx() -> AuthContext:
    """Unrestricted caller acting as user 7."""
    return AuthContext(authorized_workspace_ids=[], actor_id=7)


@pytest.fixture
def scoped_ctx() -> AuthContext:
    """Caller limited to workspaces 1 and 2."""
    return AuthContext(authorized_workspace_ids=[2, 1], actor_id=8)


@pytest_asyncio.fixture
async def client(session_factory, cache):
    """Async test client wired to the in-memory database and the test cache."""
    app = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_session_cache] = lambda: cache

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        ac.cache = cache
        yield ac

    app.dependency_overrides.clear()
