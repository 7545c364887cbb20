"""
Store contract: the only persistence surface the handlers see.

Any object with these five coroutines satisfies it (structural typing),
so tests can pass a plain double without inheriting from anything.
Implementations raise ``StoreError`` for backend failures and
``NewsNotFoundError`` when a lookup misses.
"""
from typing import Protocol, runtime_checkable
from uuid import UUID

from newsapi.schemas import NewsItem


@runtime_checkable
class NewsStorer(Protocol):
    async def create(self, item: NewsItem) -> NewsItem:
        """Persist a new item and return it."""
        ...

    async def find_by_id(self, news_id: UUID) -> NewsItem:
        """Return the item with *news_id*; ``NewsNotFoundError`` if absent."""
        ...

    async def find_all(self) -> list[NewsItem]:
        """Return every stored item."""
        ...

    async def delete_by_id(self, news_id: UUID) -> None:
        """Delete *news_id*; deleting an absent item is not an error."""
        ...

    async def update_by_id(self, item: NewsItem) -> None:
        """Replace the stored item with the same id."""
        ...
