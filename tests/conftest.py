import os
from typing import AsyncGenerator

# Settings are cached on first import, so the test environment goes in first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.base import Base
from libs.db.session import get_async_db
from services.shop_service import models as _shop_models  # noqa: F401
from services.shop_service.app.main import app
from services.shop_service.storage import LocalStorage, get_storage


ADMIN_ID = "admin-1"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh in-memory SQLite database per test, schema built from the ORM.
    Foreign keys are enforced so cascades behave like PostgreSQL.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

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
    async with session_factory() as session:
        yield session


@pytest.fixture
def admin_user() -> AuthUser:
    return AuthUser(user_id=ADMIN_ID, email="admin@admin.com", role="ADMIN")


@pytest_asyncio.fixture
async def anon_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """
    Client with the real auth dependency: requests without a token get 401.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(db_session, admin_user, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """
    Yield an AsyncClient authenticated as an admin, with DB and upload
    storage redirected to the per-test database and a temp directory.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_current_user] = lambda: admin_user
    app.dependency_overrides[get_storage] = lambda: LocalStorage(
        root=str(tmp_path / "uploads"), url_prefix="/uploads"
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def customer_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as customer ``u1``."""
    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_current_user] = lambda: AuthUser(
        user_id="u1", email="u1@test.com", role="CUSTOMER"
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
