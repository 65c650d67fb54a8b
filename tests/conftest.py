"""Pytest configuration."""
import inspect
import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE__URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECURITY__BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from account_server.infrastructure.database import Base
from account_server.infrastructure.database import models  # noqa: F401
from account_server.infrastructure.memory import InMemoryAccountRepository
from account_server.interfaces.http.deps import get_db_session
from account_server.main import app
from account_server.modules.accounts import AccountService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeClock:
    """Controllable UTC clock shared by a service and its in-memory repository."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_repository(clock: FakeClock) -> InMemoryAccountRepository:
    return InMemoryAccountRepository(clock=clock)


@pytest.fixture
def service(memory_repository: InMemoryAccountRepository, clock: FakeClock) -> AccountService:
    return AccountService(memory_repository, clock=clock)


@pytest_asyncio.fixture
async def test_engine():
    """创建测试数据库引擎"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """创建测试会话"""
    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


def _transport(**kwargs: Any) -> ASGITransport:
    transport_kwargs: dict[str, Any] = {"app": app, **kwargs}
    if "lifespan" in inspect.signature(ASGITransport.__init__).parameters:
        transport_kwargs["lifespan"] = "off"
    return ASGITransport(**transport_kwargs)


@pytest_asyncio.fixture
async def client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """创建测试客户端"""

    async def override_get_db():
        try:
            yield test_session
            await test_session.commit()
        except Exception:
            await test_session.rollback()
            raise

    app.dependency_overrides[get_db_session] = override_get_db
    async with AsyncClient(transport=_transport(), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def lenient_client() -> AsyncGenerator[AsyncClient, None]:
    """Client that returns 500 responses instead of re-raising server errors."""
    async with AsyncClient(transport=_transport(raise_app_exceptions=False), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
