import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from newsapi import __version__
from newsapi.cache import CacheManager, CachingNewsStore
from newsapi.config import settings
from newsapi.database import build_engine, build_sessionmaker
from newsapi.logger import LoggerMiddleware
from newsapi.logging_config import setup_logging
from newsapi.middleware import DiagnosticsMiddleware
from newsapi.routers import news
from newsapi.stores import InMemoryNewsStore, NewsStorer, SqlNewsStore

logger = logging.getLogger(__name__)


def build_store(engine=None) -> NewsStorer:
    """Return the backend selected by ``STORE_BACKEND``."""
    if settings.STORE_BACKEND == "memory":
        return InMemoryNewsStore()
    if settings.STORE_BACKEND == "sql":
        return SqlNewsStore(build_sessionmaker(engine or build_engine()))
    raise ValueError(f"unknown STORE_BACKEND {settings.STORE_BACKEND!r}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    engine = None
    cache = None
    if app.state.news_store is None:
        if settings.STORE_BACKEND == "sql":
            engine = build_engine()
        store = build_store(engine)
        if settings.CACHE_ENABLED:
            cache = CacheManager()
            await cache.connect()
            store = CachingNewsStore(store, cache)
        app.state.news_store = store
    logger.info(
        "server starting on %s:%d (store=%s, cache=%s)",
        settings.HOST, settings.PORT, settings.STORE_BACKEND, settings.CACHE_ENABLED,
    )
    yield
    # Shutdown
    if cache is not None:
        await cache.disconnect()
    if engine is not None:
        await engine.dispose()


def create_app(store: NewsStorer | None = None) -> FastAPI:
    """
    Build the application around *store*.

    Without a store, the lifespan builds one from settings on startup.
    ``LoggerMiddleware`` is added last, which makes it the outermost
    layer: no request reaches a route without a logger in its scope.
    """
    app = FastAPI(
        title="News API",
        description="CRUD service for news items",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.news_store = store

    app.include_router(news.router)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": __version__}

    # Middleware
    app.add_middleware(DiagnosticsMiddleware)
    app.add_middleware(LoggerMiddleware)

    return app


app = create_app()
