"""CacheUpdate model for tracking downloads of the remote package index."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from pantry_store.models.base import Base


class CacheUpdate(Base):
    """Size and hash of the package index as of one synchronisation.

    Append-only. The row with the greatest ``recorded_at`` describes the
    index currently on disk.
    """

    __tablename__ = "cache_updates"

    id: Mapped[int] = mapped_column(primary_key=True)
    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    size: Mapped[int] = mapped_column(BigInteger)
    sha256: Mapped[str] = mapped_column(String(64))

    __table_args__ = (CheckConstraint("size >= 0", name="size_non_negative"),)
