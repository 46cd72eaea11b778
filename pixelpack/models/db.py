"""
SQLAlchemy ORM models for persistent storage.

The durable store is a namespaced key/value table: each namespace
(config, progress) holds JSON records addressed by key.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StoredRecordDB(Base):
    """
    A single JSON record in a namespace.

    Writes replace the whole value; there are no partial updates.
    """

    __tablename__ = "stored_records"
    __table_args__ = (UniqueConstraint("namespace", "key", name="uq_namespace_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    namespace: Mapped[str] = mapped_column(String(64), index=True)
    key: Mapped[str] = mapped_column(String(255))
    value: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<StoredRecordDB(namespace={self.namespace}, key={self.key})>"
