"""Tests for the content-addressed blob store."""

from __future__ import annotations

import hashlib

import pytest
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.errors import BlobSizeMismatchError, StoreIntegrityError
from pantry_store.models import Blob
from pantry_store.services.blob_store import BlobStore
from pantry_store.types import SHA256


async def count_blobs(session: AsyncSession) -> int:
    return (await session.execute(select(func.count(Blob.id)))).scalar_one()


class TestStore:
    async def test_store_returns_content_hash(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)

        _, sha256 = await blobs.store(b"name: foo\n")

        assert sha256.hexdigest == hashlib.sha256(b"name: foo\n").hexdigest()

    async def test_store_is_idempotent(self, db_session: AsyncSession) -> None:
        """Storing identical content twice yields one row and one id."""
        blobs = BlobStore(db_session)

        first_id, first_hash = await blobs.store(b"same bytes")
        second_id, second_hash = await blobs.store(b"same bytes")

        assert first_id == second_id
        assert first_hash == second_hash
        assert await count_blobs(db_session) == 1

    async def test_distinct_content_gets_distinct_ids(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)

        first_id, first_hash = await blobs.store(b"version: 1.0\n")
        second_id, second_hash = await blobs.store(b"version: 2.0\n")

        assert first_id != second_id
        assert first_hash != second_hash
        assert await count_blobs(db_session) == 2

    async def test_store_records_size(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)

        blob_id, _ = await blobs.store(b"12345")

        blob = await db_session.get(Blob, blob_id)
        assert blob is not None
        assert blob.size == 5

    async def test_empty_content_is_storable(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)

        blob_id, _ = await blobs.store(b"")

        assert await blobs.load(blob_id) == b""


class TestLoad:
    async def test_load_by_id(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)
        blob_id, _ = await blobs.store(b"contents")

        assert await blobs.load(blob_id) == b"contents"

    async def test_load_unknown_id_is_absent(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)

        assert await blobs.load(12345) is None

    async def test_load_by_hash(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)
        _, sha256 = await blobs.store(b"contents")

        assert await blobs.load_by_hash(sha256) == b"contents"
        assert await blobs.load_by_hash(sha256, len(b"contents")) == b"contents"

    async def test_load_by_unknown_hash_is_absent(self, db_session: AsyncSession) -> None:
        blobs = BlobStore(db_session)

        assert await blobs.load_by_hash(SHA256.from_bytes(b"never stored")) is None
        assert await blobs.load_by_hash(SHA256.from_bytes(b"never stored"), 12) is None

    async def test_size_mismatch_is_distinguishable_from_absent(
        self, db_session: AsyncSession
    ) -> None:
        blobs = BlobStore(db_session)
        _, sha256 = await blobs.store(b"contents")

        with pytest.raises(BlobSizeMismatchError) as exc_info:
            await blobs.load_by_hash(sha256, 999)

        assert exc_info.value.sha256 == sha256
        assert exc_info.value.expected_size == 999
        assert exc_info.value.actual_size == len(b"contents")

    async def test_stored_size_disagreeing_with_contents_is_integrity_error(
        self, db_session: AsyncSession
    ) -> None:
        blobs = BlobStore(db_session)
        blob_id, sha256 = await blobs.store(b"contents")
        await db_session.execute(update(Blob).where(Blob.id == blob_id).values(size=3))

        with pytest.raises(StoreIntegrityError):
            await blobs.load_by_hash(sha256)
