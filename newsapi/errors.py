"""
Exception taxonomy for the news API.

Each class maps to exactly one response status in the router layer:

- ``DecodeError``          -> 400, empty body
- ``NewsValidationError``  -> 400, joined validation messages as body
- ``BadIdentifier``        -> 400, empty body
- ``StoreError``           -> 500, empty body (``NewsNotFoundError`` included)

Only the validation text is ever returned to the client; everything
else is logged and reduced to a bare status code.
"""
from dataclasses import dataclass
from uuid import UUID


class NewsAPIError(Exception):
    """Base class for every error raised by the request pipeline."""


class DecodeError(NewsAPIError):
    """The request body is not a structurally valid news payload."""


class BadIdentifier(NewsAPIError):
    """A path identifier is not a valid UUID."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"news id is not a valid uuid: {raw!r}")
        self.raw = raw


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def __str__(self) -> str:
        return self.message


class NewsValidationError(NewsAPIError):
    """
    Aggregate of every rule a payload violated.

    ``errors`` keeps the individual ``FieldError`` values; ``str(exc)``
    joins their messages with newlines so a client gets all problems in
    one response.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(str(e) for e in self.errors))

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class StoreError(NewsAPIError):
    """Opaque backing-store failure."""


class NewsNotFoundError(StoreError):
    def __init__(self, news_id: UUID) -> None:
        super().__init__(f"news {news_id} not found")
        self.news_id = news_id
