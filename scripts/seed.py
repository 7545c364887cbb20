"""Fill the configured news store with sample items for local testing."""
import argparse
import asyncio
import random
import time
import uuid
from datetime import datetime, timedelta, timezone

import newsapi.models  # noqa: F401
from newsapi.database import Base, build_engine
from newsapi.main import build_store
from newsapi.schemas import NewsItem
from newsapi.stores import NewsStorer

TAGS = ["politics", "economy", "technology", "science", "sports", "health",
        "culture", "world", "climate", "education"]

AUTHORS = ["code learn", "jane doe", "newsroom", "staff writer"]


def sample_item(i: int) -> NewsItem:
    created = datetime.now(timezone.utc) - timedelta(days=random.randint(0, 365))
    return NewsItem(
        id=uuid.uuid4(),
        author=random.choice(AUTHORS),
        title=f"News {i}: update on {random.choice(TAGS)}",
        summary=f"Summary of news item {i}.",
        created_at=created,
        content=f"Full content of news item {i}. " * 5,
        source=f"https://example.com/news/{i}",
        tags=random.sample(TAGS, k=random.randint(1, 3)),
    )


async def seed(store: NewsStorer, count: int) -> None:
    start = time.perf_counter()
    for i in range(count):
        await store.create(sample_item(i))
    print(f"  Created {count} news items in {time.perf_counter() - start:.2f}s")


async def main(count: int, reset: bool) -> None:
    engine = build_engine()
    if reset:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    try:
        await seed(build_store(engine), count)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=100, help="number of items to create")
    parser.add_argument("--reset", action="store_true", help="drop and recreate the news table first")
    args = parser.parse_args()
    asyncio.run(main(args.count, args.reset))
