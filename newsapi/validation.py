"""
Validation of untrusted news payloads.

``validate_news`` runs every rule independently and reports all
failures at once.  It performs no I/O, so it can be exercised directly
in unit tests without an application or a store.
"""
import re
from datetime import datetime

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from newsapi.errors import FieldError, NewsValidationError
from newsapi.schemas import NewsItem, NewsRequestBody

# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

_RFC3339_RE = re.compile(
    r"(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})[Tt]"
    r"(?P<time>[0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})"
)

_url_adapter: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC 3339 date-time into an aware ``datetime``.

    Only the RFC 3339 profile of ISO 8601 is accepted: a full date, a
    full time, optional fractional seconds and a mandatory offset.
    Fractions beyond microsecond precision are truncated.
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"cannot parse {value!r} as RFC 3339 date-time")

    fraction = (match["fraction"] or "")[:6].ljust(6, "0")
    offset = match["offset"]
    if offset in ("Z", "z"):
        offset = "+00:00"
    normalised = f"{match['date']}T{match['time']}.{fraction}{offset}"
    try:
        return datetime.fromisoformat(normalised)
    except ValueError as exc:
        # Out-of-range components, e.g. month 13 or hour 25.
        raise ValueError(f"cannot parse {value!r} as RFC 3339 date-time: {exc}") from exc


def parse_url(value: str) -> AnyUrl:
    """Parse *value* into a structured URL; scheme and host are required."""
    try:
        url = _url_adapter.validate_python(value)
    except PydanticValidationError as exc:
        reason = exc.errors()[0]["msg"]
        raise ValueError(f"cannot parse {value!r} as url: {reason}") from exc
    if not url.host:
        raise ValueError(f"cannot parse {value!r} as url: missing host")
    return url


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

def validate_news(body: NewsRequestBody) -> NewsItem:
    """
    Turn a decoded request body into a ``NewsItem``.

    Raises ``NewsValidationError`` listing every violated rule; no
    partially built item is returned in that case.
    """
    errors: list[FieldError] = []

    if not body.author:
        errors.append(FieldError("author", "author is empty"))
    if not body.title:
        errors.append(FieldError("title", "title is empty"))
    if not body.summary:
        errors.append(FieldError("summary", "summary is empty"))

    created_at = None
    try:
        created_at = parse_rfc3339(body.created_at)
    except ValueError as exc:
        errors.append(FieldError("created_at", str(exc)))

    source = None
    try:
        source = parse_url(body.source)
    except ValueError as exc:
        errors.append(FieldError("source", str(exc)))

    if not body.tags:
        errors.append(FieldError("tags", "tags cannot be empty"))

    if errors:
        raise NewsValidationError(errors)

    return NewsItem(
        id=body.id,
        author=body.author,
        title=body.title,
        summary=body.summary,
        created_at=created_at,
        content=body.content,
        source=source,
        tags=list(body.tags),
    )
