import json
import logging
from uuid import UUID

import redis.asyncio as redis
from redis.exceptions import RedisError

from newsapi.config import settings
from newsapi.schemas import NewsItem
from newsapi.stores.base import NewsStorer

logger = logging.getLogger(__name__)

LIST_KEY = "news:list"
DETAIL_KEY = "news:detail:{news_id}"


class CacheManager:
    """
    Cache-aside manager backed by Redis.

    All public methods are safe to call even when Redis is unavailable:
    reads return None and writes are skipped, so a cache outage never
    turns into a failed request.
    """

    def __init__(self, client: redis.Redis | None = None) -> None:
        self._redis: redis.Redis | None = client

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, url: str | None = None) -> None:
        """Open the connection pool.  Called once at application startup."""
        url = url or settings.REDIS_URL
        self._redis = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", url)
        except (RedisError, OSError) as exc:  # pragma: no cover
            logger.warning("Redis ping failed, cache disabled: %s", exc)

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        """Return the cached value for *key*, or None on a miss or error."""
        if not self._redis:
            return None
        try:
            data = await self._redis.get(key)
            value = json.loads(data) if data is not None else None
        except (RedisError, OSError, ValueError) as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            return None
        return value

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value), ex=ttl)
        except (RedisError, OSError) as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        if not self._redis or not keys:
            return
        try:
            await self._redis.delete(*keys)
        except (RedisError, OSError) as exc:
            logger.debug("Cache DELETE error for keys=%r: %s", keys, exc)

    async def invalidate_news(self, news_id: UUID | None = None) -> None:
        """
        Drop the list entry, and the detail entry for *news_id* when
        given.  Called after every write.
        """
        keys = [LIST_KEY]
        if news_id is not None:
            keys.append(DETAIL_KEY.format(news_id=news_id))
        await self.delete(*keys)


class CachingNewsStore:
    """
    ``NewsStorer`` decorator that serves reads from Redis and falls back
    to the wrapped store on a miss.

    Writes always go to the wrapped store first; the cache is only
    invalidated once the write succeeded.  Store errors pass through
    untouched.
    """

    def __init__(
        self,
        store: NewsStorer,
        cache: CacheManager,
        ttl_list: int | None = None,
        ttl_detail: int | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._ttl_list = ttl_list if ttl_list is not None else settings.CACHE_TTL_LIST
        self._ttl_detail = ttl_detail if ttl_detail is not None else settings.CACHE_TTL_DETAIL

    async def create(self, item: NewsItem) -> NewsItem:
        created = await self._store.create(item)
        await self._cache.invalidate_news()
        return created

    async def find_by_id(self, news_id: UUID) -> NewsItem:
        key = DETAIL_KEY.format(news_id=news_id)
        cached = await self._cache.get(key)
        if cached is not None:
            return NewsItem.model_validate(cached)

        item = await self._store.find_by_id(news_id)
        await self._cache.set(key, item.model_dump(mode="json"), ttl=self._ttl_detail)
        return item

    async def find_all(self) -> list[NewsItem]:
        cached = await self._cache.get(LIST_KEY)
        if cached is not None:
            return [NewsItem.model_validate(n) for n in cached]

        items = await self._store.find_all()
        await self._cache.set(
            LIST_KEY, [n.model_dump(mode="json") for n in items], ttl=self._ttl_list
        )
        return items

    async def delete_by_id(self, news_id: UUID) -> None:
        await self._store.delete_by_id(news_id)
        await self._cache.invalidate_news(news_id)

    async def update_by_id(self, item: NewsItem) -> None:
        await self._store.update_by_id(item)
        await self._cache.invalidate_news(item.id)
