"""
Request-scoped logging context.

The ASGI connection scope is the request's execution context: every
layer below the middleware receives the same scope, and FastAPI exposes
it to handlers as ``request.scope``.  ``LoggerMiddleware`` stores a
logger in it, enriched with the request id, method and path, and
handlers pick it up again with ``from_context(request.scope)``.
"""
import logging
import time
import uuid
from collections.abc import Mapping, MutableMapping
from typing import Any

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

LOGGER_SCOPE_KEY = "newsapi.logger"
REQUEST_ID_HEADER = "x-request-id"

DEFAULT_LOGGER_NAME = "newsapi"


class RequestLogger(logging.LoggerAdapter):
    """
    ``LoggerAdapter`` whose bound fields are merged with call-site
    ``extra`` instead of replacing it, so ``log.error(..., extra={...})``
    keeps the request fields.
    """

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **fields: Any) -> "RequestLogger":
        """Return a child logger carrying *fields* in addition to ours."""
        return RequestLogger(self.logger, {**self.extra, **fields})


def default_logger() -> RequestLogger:
    """Logger used when a request context carries none."""
    return RequestLogger(logging.getLogger(DEFAULT_LOGGER_NAME), {})


def with_logger(scope: Scope, logger: logging.LoggerAdapter | logging.Logger | None) -> Scope:
    """
    Return a copy of *scope* carrying *logger*.

    An existing logger is never replaced, so an upstream caller's
    enrichment survives a second application; a ``None`` logger leaves
    the scope untouched.
    """
    if logger is None or scope.get(LOGGER_SCOPE_KEY) is not None:
        return scope
    return {**scope, LOGGER_SCOPE_KEY: logger}


def from_context(scope: Mapping[str, Any]) -> logging.LoggerAdapter | logging.Logger:
    """Return the logger carried by *scope*, or a default one."""
    logger = scope.get(LOGGER_SCOPE_KEY)
    if logger is None:
        return default_logger()
    return logger


# ---------------------------------------------------------------------------
# Middleware (pure ASGI, the scope copy is what the app below sees)
# ---------------------------------------------------------------------------

class LoggerMiddleware:
    """
    Inject a request logger into every HTTP request's scope.

    The logger is *logger* (or the process default) bound to
    ``request_id``, ``method`` and ``path``.  The request id is taken
    from an inbound ``X-Request-ID`` header when present, generated
    otherwise, and echoed on the response.
    """

    def __init__(self, app: ASGIApp, logger: logging.LoggerAdapter | logging.Logger | None = None) -> None:
        self.app = app
        if logger is None:
            logger = default_logger()
        elif not isinstance(logger, RequestLogger):
            logger = RequestLogger(logger, {})
        self.logger: RequestLogger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        scope = with_logger(
            scope,
            self.logger.bind(request_id=request_id, method=scope["method"], path=scope["path"]),
        )
        log = from_context(scope)
        start = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER.encode(), request_id.encode()))
                message["headers"] = headers
                log.info(
                    "request completed in %.2f ms",
                    (time.perf_counter() - start) * 1000,
                    extra={"status": message["status"]},
                )
            await send(message)

        await self.app(scope, receive, send_wrapper)
