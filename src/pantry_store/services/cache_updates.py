"""Freshness tracking for the downloaded package index.

Each time the remote index is synchronised the caller records the size and
hash of what it now has on disk. Before the next download it compares the
latest record against the remote to decide whether fetching and re-hashing
is needed at all.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.models.cache_update import CacheUpdate
from pantry_store.types import SHA256


class CacheUpdateTracker:
    """Service for the append-only log of index snapshots."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service with a database session."""
        self._session = session

    async def record(self, size: int, sha256: SHA256, *, now: datetime | None = None) -> None:
        """Append a snapshot of the index's size and hash.

        Args:
            size: Size of the index in bytes.
            sha256: Hash of the index contents.
            now: Timezone-aware timestamp to record; defaults to the current
                UTC time.

        Raises:
            ValueError: If ``size`` is negative or ``now`` is naive.
        """
        if size < 0:
            raise ValueError(f"Index size must be non-negative, got {size}")
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None or now.utcoffset() is None:
            raise ValueError(f"Snapshot timestamp must be timezone-aware, got {now!r}")
        # SQLite stores wall-clock text without the offset, so order only holds in UTC.
        self._session.add(
            CacheUpdate(
                recorded_at=now.astimezone(timezone.utc),
                size=size,
                sha256=sha256.hexdigest,
            )
        )
        await self._session.flush()

    async def latest(self) -> tuple[int, SHA256] | None:
        """Return (size, hash) of the most recent snapshot, or None if none was recorded."""
        stmt = (
            select(CacheUpdate.size, CacheUpdate.sha256)
            .order_by(CacheUpdate.recorded_at.desc(), CacheUpdate.id.desc())
            .limit(1)
        )
        row = (await self._session.execute(stmt)).first()
        if row is None:
            return None
        return row.size, SHA256(row.sha256)
