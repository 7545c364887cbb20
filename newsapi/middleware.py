"""
Per-request SQL statement accounting.

SQLAlchemy runs cursor events inside its own greenlet, so a plain
integer ``ContextVar.set`` there is not seen by the request task.  The
request instead publishes a mutable ``QueryCounter`` and the engine
listener increments that object in place.
"""
import time
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from newsapi.logger import from_context


@dataclass
class QueryCounter:
    statements: int = 0


_current_counter: ContextVar[QueryCounter | None] = ContextVar("query_counter", default=None)


@contextmanager
def counting_queries() -> Iterator[QueryCounter]:
    """Count the statements issued by instrumented engines in this block."""
    counter = QueryCounter()
    token = _current_counter.set(counter)
    try:
        yield counter
    finally:
        _current_counter.reset(token)


def install_query_counter(engine: AsyncEngine) -> None:
    """Feed *engine*'s statements into the active ``QueryCounter``, if any."""
    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _count_statement(conn, cursor, statement, parameters, context, executemany):
        counter = _current_counter.get()
        if counter is not None:
            counter.statements += 1


class DiagnosticsMiddleware:
    """
    Report ``X-Response-Time-Ms`` and ``X-Query-Count`` on every news
    response, and log the statement count at debug level.

    The in-memory store issues no SQL, so its count is always 0.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        with counting_queries() as counter:

            async def send_wrapper(message: Message) -> None:
                if message["type"] == "http.response.start":
                    elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
                    message["headers"] = [
                        *message.get("headers", []),
                        (b"x-response-time-ms", str(elapsed_ms).encode()),
                        (b"x-query-count", str(counter.statements).encode()),
                    ]
                    from_context(scope).debug("%d sql statement(s)", counter.statements)
                await send(message)

            await self.app(scope, receive, send_wrapper)
