import os
from typing import AsyncGenerator

# Tests always run against SQLite; set before any settings are read
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Optional overrides for local runs (never DATABASE_URL)
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=False)

from libs.auth.dependencies import get_current_user
from libs.auth.models import SERVICE_ROLE, AuthUser
from libs.common.config import get_settings
from libs.db.base import Base
from libs.db.session import get_async_db

# Import all models so metadata includes every table
from services.accounts_service import models as _account_models  # noqa: F401
from services.accounts_service.app.main import app
from tests.factories import make_auth_user

# Clear cached settings to reload with the test env vars
get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test.
    StaticPool keeps the single connection alive so every session sees the
    same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """
    File-backed SQLite database, for tests that need several connections
    writing at once.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def file_session_factory(file_engine):
    return async_sessionmaker(
        bind=file_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
def override_auth():
    """
    Act as a given caller: ``override_auth(user)`` where ``user`` is a model
    instance or an ``AuthUser``.
    """

    def _override(user) -> AuthUser:
        if isinstance(user, AuthUser):
            auth_user = user
        else:
            role = user.role.value if hasattr(user.role, "value") else user.role
            auth_user = make_auth_user(user.auth_id, role, user.email)
        app.dependency_overrides[get_current_user] = lambda: auth_user
        return auth_user

    yield _override
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def service_role_override(override_auth):
    return override_auth(make_auth_user("auth-service", SERVICE_ROLE, None))


@pytest_asyncio.fixture
async def accounts_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient for the accounts app with the DB dependency pointed
    at the test session.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
