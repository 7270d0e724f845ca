"""SQLAlchemy models for locally persisted state."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hnsearch.db.base import Base
from hnsearch.utils.datetime import utc_now


class StoredValue(Base):
    """One serialized value per key; writes overwrite (last writer wins)."""

    __tablename__ = "stored_values"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


__all__ = ["StoredValue"]
