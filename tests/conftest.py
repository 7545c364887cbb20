"""
Test infrastructure for the news API.

Strategy
--------
- Handler tests run the real FastAPI app through httpx's ASGITransport
  with a store injected via ``create_app(store)``; the lifespan is not
  started, so nothing reaches Postgres or Redis.
- ``FailingNewsStore`` plays the broken backend: every operation raises
  ``StoreError``.
- SQL store tests use SQLite in-memory via aiosqlite.  StaticPool keeps
  every session on the same connection, which an in-memory database
  needs to be visible across sessions.  Tables are created before and
  dropped after each test.
"""
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

import newsapi.models  # noqa: F401
from newsapi.database import Base, build_engine, build_sessionmaker
from newsapi.errors import StoreError
from newsapi.main import create_app
from newsapi.stores import InMemoryNewsStore, SqlNewsStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

NEWS_ID = "3b082d9d-1dc7-4d1f-907e-50d449a03d45"


# ---------------------------------------------------------------------------
# Store doubles
# ---------------------------------------------------------------------------

class FailingNewsStore:
    """Store whose every operation fails like an unreachable database."""

    async def create(self, item):
        raise StoreError("some error")

    async def find_by_id(self, news_id):
        raise StoreError("some error")

    async def find_all(self):
        raise StoreError("some error")

    async def delete_by_id(self, news_id):
        raise StoreError("some error")

    async def update_by_id(self, item):
        raise StoreError("some error")


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def news_payload():
    """Factory for a valid request body; keyword overrides replace fields,
    ``None`` drops a field."""
    def _make(**overrides) -> dict:
        payload = {
            "id": NEWS_ID,
            "author": "code learn",
            "title": "first news",
            "summary": "first news post",
            "content": "news content",
            "created_at": "2024-04-07T05:13:27+00:00",
            "source": "https://example.com",
            "tags": ["politics"],
        }
        payload.update(overrides)
        return {k: v for k, v in payload.items() if v is not None}
    return _make


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_store() -> InMemoryNewsStore:
    return InMemoryNewsStore()


@pytest.fixture
def failing_store() -> FailingNewsStore:
    return FailingNewsStore()


@pytest_asyncio.fixture
async def sql_engine():
    engine = build_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def sql_store(sql_engine) -> SqlNewsStore:
    return SqlNewsStore(build_sessionmaker(sql_engine))


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

def _client_for(store) -> AsyncClient:
    transport = ASGITransport(app=create_app(store))
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def async_client(memory_store) -> AsyncClient:
    """Client for an app backed by a fresh in-memory store."""
    async with _client_for(memory_store) as client:
        yield client


@pytest_asyncio.fixture
async def failing_client(failing_store) -> AsyncClient:
    """Client for an app whose store fails every call."""
    async with _client_for(failing_store) as client:
        yield client


@pytest_asyncio.fixture
async def sql_client(sql_store) -> AsyncClient:
    """Client for an app backed by the SQLite-based SQL store."""
    async with _client_for(sql_store) as client:
        yield client


@pytest.fixture
def random_news_id() -> str:
    return str(uuid.uuid4())
