from datetime import datetime
from uuid import UUID

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

NIL_UUID = UUID(int=0)


# --- Domain entity ---

class NewsItem(BaseModel):
    """A validated news article, as stored and as returned to clients."""

    id: UUID
    author: str
    title: str
    summary: str
    created_at: datetime
    content: str = ""
    source: AnyUrl
    tags: list[str]
    model_config = ConfigDict(from_attributes=True)


# --- Request / response bodies ---

class NewsRequestBody(BaseModel):
    """
    Structurally decoded POST/PUT payload.

    Every field defaults to its zero value, and a JSON null decodes to
    that zero value too, so a missing field is reported by
    ``validate_news`` rather than by the decoder.  Only a body that is
    not JSON, or has values of the wrong JSON type, fails to decode.
    """

    id: UUID = NIL_UUID
    author: str = ""
    title: str = ""
    summary: str = ""
    created_at: str = ""
    content: str = ""
    source: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_zero_value(cls, value, info: ValidationInfo):
        # JSON null decodes like an absent field.
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class AllNewsResponse(BaseModel):
    news: list[NewsItem]
