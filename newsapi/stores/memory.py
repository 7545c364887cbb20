import asyncio
from uuid import UUID

from newsapi.errors import NewsNotFoundError, StoreError
from newsapi.schemas import NewsItem


def _copy(item: NewsItem) -> NewsItem:
    return item.model_copy(update={"tags": list(item.tags)})


class InMemoryNewsStore:
    """
    Process-local store keyed by news id.

    Items are copied on the way in and out so callers never share an
    instance with the store.
    """

    def __init__(self) -> None:
        self._items: dict[UUID, NewsItem] = {}
        self._lock = asyncio.Lock()

    async def create(self, item: NewsItem) -> NewsItem:
        async with self._lock:
            if item.id in self._items:
                raise StoreError(f"news {item.id} already exists")
            self._items[item.id] = _copy(item)
        return _copy(item)

    async def find_by_id(self, news_id: UUID) -> NewsItem:
        async with self._lock:
            item = self._items.get(news_id)
        if item is None:
            raise NewsNotFoundError(news_id)
        return _copy(item)

    async def find_all(self) -> list[NewsItem]:
        async with self._lock:
            items = list(self._items.values())
        items.sort(key=lambda n: (n.created_at, str(n.id)))
        return [_copy(n) for n in items]

    async def delete_by_id(self, news_id: UUID) -> None:
        async with self._lock:
            self._items.pop(news_id, None)

    async def update_by_id(self, item: NewsItem) -> None:
        async with self._lock:
            if item.id not in self._items:
                raise NewsNotFoundError(item.id)
            self._items[item.id] = _copy(item)
