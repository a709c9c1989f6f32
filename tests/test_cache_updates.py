"""Tests for index freshness tracking."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.services.cache_updates import CacheUpdateTracker
from pantry_store.types import SHA256

H1 = SHA256.from_bytes(b"index snapshot 1")
H2 = SHA256.from_bytes(b"index snapshot 2")
T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


async def test_no_snapshot_is_absent(db_session: AsyncSession) -> None:
    assert await CacheUpdateTracker(db_session).latest() is None


async def test_latest_is_most_recent_snapshot(db_session: AsyncSession) -> None:
    tracker = CacheUpdateTracker(db_session)

    await tracker.record(100, H1, now=T0)
    await tracker.record(200, H2, now=T0 + timedelta(minutes=5))

    assert await tracker.latest() == (200, H2)


async def test_latest_is_by_timestamp_not_insertion_order(db_session: AsyncSession) -> None:
    tracker = CacheUpdateTracker(db_session)

    await tracker.record(200, H2, now=T0 + timedelta(minutes=5))
    await tracker.record(100, H1, now=T0)

    assert await tracker.latest() == (200, H2)


async def test_latest_compares_instants_across_utc_offsets(db_session: AsyncSession) -> None:
    """13:00+05:00 is 08:00 UTC, so the 12:00 UTC snapshot is the later one."""
    tracker = CacheUpdateTracker(db_session)
    plus_five = timezone(timedelta(hours=5))

    await tracker.record(100, H1, now=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
    await tracker.record(200, H2, now=datetime(2024, 1, 1, 13, 0, tzinfo=plus_five))

    assert await tracker.latest() == (100, H1)


async def test_naive_timestamp_is_rejected(db_session: AsyncSession) -> None:
    tracker = CacheUpdateTracker(db_session)

    with pytest.raises(ValueError):
        await tracker.record(100, H1, now=datetime(2024, 1, 1, 12, 0))


async def test_record_defaults_to_current_time(db_session: AsyncSession) -> None:
    tracker = CacheUpdateTracker(db_session)

    await tracker.record(100, H1, now=T0)
    await tracker.record(200, H2)

    assert await tracker.latest() == (200, H2)
