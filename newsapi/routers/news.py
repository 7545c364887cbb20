"""
News endpoints.

Bodies are read and decoded by hand rather than through a FastAPI body
parameter: a malformed body must produce a bare 400 and a semantically
invalid one a 400 carrying every validation message, neither of which
matches FastAPI's 422 behaviour.  The same goes for ``news_id``, which
is taken as text and parsed here so a bad UUID is a 400.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from newsapi.dependencies import get_store
from newsapi.errors import BadIdentifier, DecodeError, NewsValidationError, StoreError
from newsapi.logger import from_context
from newsapi.schemas import AllNewsResponse, NewsItem, NewsRequestBody
from newsapi.stores.base import NewsStorer
from newsapi.validation import validate_news

router = APIRouter(prefix="/news", tags=["news"])

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def parse_news_id(raw: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError as exc:
        raise BadIdentifier(raw) from exc


async def read_news(request: Request) -> NewsItem:
    """Decode and validate the request body.

    Raises ``DecodeError`` or ``NewsValidationError``.
    """
    raw = await request.body()
    try:
        body = NewsRequestBody.model_validate_json(raw)
    except PydanticValidationError as exc:
        raise DecodeError(str(exc)) from exc
    return validate_news(body)


def _rejected_payload(
    exc: DecodeError | NewsValidationError, log: logging.LoggerAdapter | logging.Logger
) -> Response:
    if isinstance(exc, DecodeError):
        log.error("failed to decode the request", extra={"error": str(exc)})
        return Response(status_code=400)
    log.error("request validation failed", extra={"error": str(exc)})
    return PlainTextResponse(str(exc), status_code=400)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.post("", status_code=201)
async def create_news(request: Request, store: NewsStorer = Depends(get_store)) -> Response:
    log = from_context(request.scope)
    log.info("request received")

    try:
        item = await read_news(request)
    except (DecodeError, NewsValidationError) as exc:
        return _rejected_payload(exc, log)

    try:
        await store.create(item)
    except StoreError as exc:
        log.error("error creating news", extra={"news_id": item.id, "error": str(exc)})
        return Response(status_code=500)
    return Response(status_code=201)


@router.get("")
async def get_all_news(request: Request, store: NewsStorer = Depends(get_store)) -> Response:
    log = from_context(request.scope)
    log.info("request received")

    try:
        items = await store.find_all()
    except StoreError as exc:
        log.error("failed to fetch all news", extra={"error": str(exc)})
        return Response(status_code=500)
    return JSONResponse(AllNewsResponse(news=items).model_dump(mode="json"))


@router.get("/{news_id}")
async def get_news_by_id(news_id: str, request: Request, store: NewsStorer = Depends(get_store)) -> Response:
    log = from_context(request.scope)
    log.info("request received")

    try:
        news_uuid = parse_news_id(news_id)
    except BadIdentifier as exc:
        log.error("news id not a valid uuid", extra={"news_id": news_id, "error": str(exc)})
        return Response(status_code=400)

    try:
        item = await store.find_by_id(news_uuid)
    except StoreError as exc:
        # Not found and backend failures are deliberately the same 500.
        log.error("news not found", extra={"news_id": news_id, "error": str(exc)})
        return Response(status_code=500)
    return JSONResponse(item.model_dump(mode="json"))


@router.api_route("/{news_id}", methods=["PUT", "PATCH"])
async def update_news_by_id(news_id: str, request: Request, store: NewsStorer = Depends(get_store)) -> Response:
    log = from_context(request.scope)
    log.info("request received")

    try:
        news_uuid = parse_news_id(news_id)
    except BadIdentifier as exc:
        log.error("news id not a valid uuid", extra={"news_id": news_id, "error": str(exc)})
        return Response(status_code=400)

    try:
        item = await read_news(request)
    except (DecodeError, NewsValidationError) as exc:
        return _rejected_payload(exc, log)

    # The path names the resource; a body id is ignored.
    item = item.model_copy(update={"id": news_uuid})
    try:
        await store.update_by_id(item)
    except StoreError as exc:
        log.error("error updating news", extra={"news_id": news_id, "error": str(exc)})
        return Response(status_code=500)
    return Response(status_code=200)


@router.delete("/{news_id}", status_code=204)
async def delete_news_by_id(news_id: str, request: Request, store: NewsStorer = Depends(get_store)) -> Response:
    log = from_context(request.scope)
    log.info("request received")

    try:
        news_uuid = parse_news_id(news_id)
    except BadIdentifier as exc:
        log.error("news id not a valid uuid", extra={"news_id": news_id, "error": str(exc)})
        return Response(status_code=400)

    try:
        await store.delete_by_id(news_uuid)
    except StoreError as exc:
        log.error("error deleting news", extra={"news_id": news_id, "error": str(exc)})
        return Response(status_code=500)
    return Response(status_code=204)
