"""Blob model for content-addressable storage and deduplication."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, LargeBinary, String, func
from sqlalchemy.orm import Mapped, mapped_column

from pantry_store.models.base import Base


class Blob(Base):
    """Content-addressable blob storage for deduplication.

    Blobs are identified by their SHA256 hash. Revisions reference blobs
    by id, so identical cabal files published under different packages
    share a single row. Rows are never updated or deleted.
    """

    __tablename__ = "blobs"

    id: Mapped[int] = mapped_column(primary_key=True)
    sha256: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    size: Mapped[int] = mapped_column(BigInteger)
    contents: Mapped[bytes] = mapped_column(LargeBinary)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (CheckConstraint("size >= 0", name="size_non_negative"),)
