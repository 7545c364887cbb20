"""
Store contract tests.

Every test in the first section runs against both shipped backends
(in-memory and SQL over SQLite) so they are held to the same contract.
"""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from newsapi.database import Base, build_engine, build_sessionmaker
from newsapi.errors import NewsNotFoundError, StoreError
from newsapi.middleware import counting_queries
from newsapi.models import NewsRecord
from newsapi.schemas import NewsItem
from newsapi.stores import InMemoryNewsStore, NewsStorer, SqlNewsStore

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_item(**overrides) -> NewsItem:
    data = {
        "id": uuid.uuid4(),
        "author": "code learn",
        "title": "first news",
        "summary": "first news post",
        "created_at": datetime(2024, 4, 7, 5, 13, 27, tzinfo=timezone.utc),
        "content": "news content",
        "source": "https://example.com/news/1",
        "tags": ["politics", "world"],
    }
    data.update(overrides)
    return NewsItem(**data)


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request):
    if request.param == "memory":
        yield InMemoryNewsStore()
        return

    engine = build_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SqlNewsStore(build_sessionmaker(engine))
    await engine.dispose()


# ---------------------------------------------------------------------------
# Shared contract
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_backends_satisfy_protocol(memory_store, sql_store):
    assert isinstance(memory_store, NewsStorer)
    assert isinstance(sql_store, NewsStorer)


@pytest.mark.asyncio
async def test_create_then_find_by_id(store):
    item = make_item()
    assert await store.create(item) == item
    assert await store.find_by_id(item.id) == item


@pytest.mark.asyncio
async def test_find_by_id_missing(store):
    with pytest.raises(NewsNotFoundError):
        await store.find_by_id(uuid.uuid4())


@pytest.mark.asyncio
async def test_not_found_is_a_store_error(store):
    with pytest.raises(StoreError):
        await store.find_by_id(uuid.uuid4())


@pytest.mark.asyncio
async def test_create_duplicate_id_fails(store):
    item = make_item()
    await store.create(item)
    with pytest.raises(StoreError):
        await store.create(make_item(id=item.id, title="other"))


@pytest.mark.asyncio
async def test_find_all_orders_by_creation_time(store):
    base = datetime(2024, 4, 7, tzinfo=timezone.utc)
    later = make_item(title="later", created_at=base + timedelta(hours=2))
    earlier = make_item(title="earlier", created_at=base)
    await store.create(later)
    await store.create(earlier)

    assert [n.title for n in await store.find_all()] == ["earlier", "later"]


@pytest.mark.asyncio
async def test_find_all_empty(store):
    assert await store.find_all() == []


@pytest.mark.asyncio
async def test_update_by_id_replaces_item(store):
    item = make_item()
    await store.create(item)

    updated = make_item(id=item.id, title="updated", tags=["economy"], content="")
    await store.update_by_id(updated)

    assert await store.find_by_id(item.id) == updated


@pytest.mark.asyncio
async def test_update_by_id_missing(store):
    with pytest.raises(NewsNotFoundError):
        await store.update_by_id(make_item())


@pytest.mark.asyncio
async def test_delete_by_id(store):
    item = make_item()
    await store.create(item)
    await store.delete_by_id(item.id)

    with pytest.raises(NewsNotFoundError):
        await store.find_by_id(item.id)


@pytest.mark.asyncio
async def test_delete_by_id_is_idempotent(store):
    await store.delete_by_id(uuid.uuid4())


@pytest.mark.asyncio
async def test_tag_order_is_preserved(store):
    item = make_item(tags=["z", "a", "m"])
    await store.create(item)
    assert (await store.find_by_id(item.id)).tags == ["z", "a", "m"]


@pytest.mark.asyncio
async def test_offset_timestamps_keep_their_instant(store):
    plus_two = timezone(timedelta(hours=2))
    item = make_item(created_at=datetime(2024, 4, 7, 7, 13, 27, tzinfo=plus_two))
    await store.create(item)

    found = await store.find_by_id(item.id)
    assert found.created_at == datetime(2024, 4, 7, 5, 13, 27, tzinfo=timezone.utc)
    assert found.created_at.tzinfo is not None


# ---------------------------------------------------------------------------
# Backend specifics
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_memory_store_returns_copies(memory_store):
    item = make_item()
    await memory_store.create(item)

    found = await memory_store.find_by_id(item.id)
    found.tags.append("mutated")
    assert (await memory_store.find_by_id(item.id)).tags == ["politics", "world"]


@pytest.mark.asyncio
async def test_sql_store_wraps_database_errors():
    # No tables created: every statement fails inside SQLite.
    engine = build_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = SqlNewsStore(build_sessionmaker(engine))
    try:
        with pytest.raises(StoreError):
            await store.create(make_item())
        with pytest.raises(StoreError):
            await store.find_all()
        with pytest.raises(StoreError):
            await store.find_by_id(uuid.uuid4())
        with pytest.raises(StoreError):
            await store.delete_by_id(uuid.uuid4())
        with pytest.raises(StoreError):
            await store.update_by_id(make_item())
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_sql_statements_are_counted(sql_store):
    with counting_queries() as counter:
        await sql_store.create(make_item())
        await sql_store.find_all()
    assert counter.statements >= 2

    # Statements outside a counting block are not attributed to it.
    counted = counter.statements
    await sql_store.find_all()
    assert counter.statements == counted
    with counting_queries() as fresh:
        pass
    assert fresh.statements == 0


@pytest.mark.asyncio
async def test_memory_store_issues_no_statements(memory_store):
    with counting_queries() as counter:
        await memory_store.create(make_item())
        await memory_store.find_all()
    assert counter.statements == 0


def test_news_table_holds_exactly_the_item_fields():
    assert set(NewsRecord.__table__.columns.keys()) == set(NewsItem.model_fields)
