from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from newsapi.config import settings
from newsapi.middleware import install_query_counter


class Base(DeclarativeBase):
    pass


def build_engine(url: str | None = None, **kwargs: Any) -> AsyncEngine:
    """
    Create the async engine for *url* (default: the configured database)
    with the per-request query counter installed.
    """
    url = url or settings.database_url
    connect_args = dict(kwargs.pop("connect_args", {}))
    if url.startswith("postgresql+asyncpg") and settings.DATABASE_SSL_MODE != "disable":
        connect_args["ssl"] = settings.DATABASE_SSL_MODE

    engine = create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        connect_args=connect_args,
        **kwargs,
    )
    install_query_counter(engine)
    return engine


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
