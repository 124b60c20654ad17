"""Shared test fixtures."""

import os

# Must be set before templecloud.config is imported
os.environ.setdefault("TEMPLE_LOCAL_MODE", "1")
os.environ.setdefault("TEMPLE_RATE_LIMIT_ENABLED", "0")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from helpers import FakeRedis
from templecloud.db.base import Base
from templecloud.db.engine import create_db_engine
# Import all models to register with Base.metadata
import templecloud.db.models  # noqa: F401
from templecloud.storage.memory import MemoryStorage


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_db_engine("sqlite+aiosqlite:///")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def file_db_engine(tmp_path):
    """File-backed SQLite engine; separate connections see each other's commits."""
    engine = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'templecloud_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage():
    return MemoryStorage("https://assets.test")


@pytest.fixture
def redis():
    return FakeRedis()


@pytest.fixture
def app(db_engine, session_factory, storage, redis):
    """Create a test application instance with in-memory DB and storage."""
    from templecloud.main import create_app

    _app = create_app()
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = session_factory
    _app.state.storage = storage
    _app.state.redis = redis
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
