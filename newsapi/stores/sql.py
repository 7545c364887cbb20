"""
SQLAlchemy-backed news store.

Each operation opens its own session from the injected factory and
commits on success, so a request never holds a connection across store
calls.  Driver and database failures are re-raised as ``StoreError``;
the handlers never see SQLAlchemy exceptions.
"""
from datetime import timezone
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from newsapi.errors import NewsNotFoundError, StoreError
from newsapi.models import NewsRecord
from newsapi.schemas import NewsItem

# ---------------------------------------------------------------------------
# Row <-> entity mapping
# ---------------------------------------------------------------------------

def _row_values(item: NewsItem) -> dict:
    return {
        "author": item.author,
        "title": item.title,
        "summary": item.summary,
        "content": item.content,
        "source": str(item.source),
        "tags": list(item.tags),
        # SQLite drops the offset, so always persist UTC.
        "created_at": item.created_at.astimezone(timezone.utc),
    }


def _to_item(record: NewsRecord) -> NewsItem:
    created_at = record.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return NewsItem(
        id=record.id,
        author=record.author,
        title=record.title,
        summary=record.summary,
        created_at=created_at,
        content=record.content,
        source=record.source,
        tags=list(record.tags),
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class SqlNewsStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, item: NewsItem) -> NewsItem:
        try:
            async with self._session_factory.begin() as db:
                db.add(NewsRecord(id=item.id, **_row_values(item)))
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"creating news {item.id}: {exc}") from exc
        return item

    async def find_by_id(self, news_id: UUID) -> NewsItem:
        try:
            async with self._session_factory() as db:
                record = await db.get(NewsRecord, news_id)
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"fetching news {news_id}: {exc}") from exc
        if record is None:
            raise NewsNotFoundError(news_id)
        return _to_item(record)

    async def find_all(self) -> list[NewsItem]:
        q = select(NewsRecord).order_by(NewsRecord.created_at, NewsRecord.id)
        try:
            async with self._session_factory() as db:
                records = (await db.execute(q)).scalars().all()
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"fetching all news: {exc}") from exc
        return [_to_item(r) for r in records]

    async def delete_by_id(self, news_id: UUID) -> None:
        try:
            async with self._session_factory.begin() as db:
                await db.execute(delete(NewsRecord).where(NewsRecord.id == news_id))
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"deleting news {news_id}: {exc}") from exc

    async def update_by_id(self, item: NewsItem) -> None:
        q = (
            update(NewsRecord)
            .where(NewsRecord.id == item.id)
            .values(**_row_values(item))
        )
        try:
            async with self._session_factory.begin() as db:
                result = await db.execute(q)
                matched = result.rowcount
        except (SQLAlchemyError, OSError) as exc:
            raise StoreError(f"updating news {item.id}: {exc}") from exc
        if matched == 0:
            raise NewsNotFoundError(item.id)
