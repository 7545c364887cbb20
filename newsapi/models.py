from __future__ import annotations

import uuid
from datetime import datetime
from typing import List

from sqlalchemy import JSON, DateTime, Index, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from newsapi.database import Base

# Native text[] on Postgres, JSON elsewhere (SQLite in the test suite).
TagList = JSON().with_variant(ARRAY(Text), "postgresql")


# ---------------------------------------------------------------------------
# News
# ---------------------------------------------------------------------------
class NewsRecord(Base):
    __tablename__ = "news"

    __table_args__ = (
        # Listing order for find_all
        Index("ix_news_created_at_id", "created_at", "id"),
    )

    # Caller-supplied; never generated by the database.
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    source: Mapped[str] = mapped_column(Text, nullable=False)
    tags: Mapped[List[str]] = mapped_column(TagList, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
