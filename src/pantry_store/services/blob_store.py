"""Content-addressed blob storage.

Blobs are keyed by the SHA-256 of their contents. Storing the same bytes
twice returns the row written the first time; nothing is ever overwritten.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.errors import BlobSizeMismatchError, StoreIntegrityError
from pantry_store.models.blob import Blob
from pantry_store.types import SHA256
from pantry_store.utils.unique import insert_or_select, scalar_unique

logger = logging.getLogger(__name__)


class BlobStore:
    """Service for storing and loading immutable blobs.

    Usage:
        async with storage.session() as store:
            blob_id, sha256 = await store.blobs.store(contents)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service with a database session."""
        self._session = session

    async def store(self, contents: bytes) -> tuple[int, SHA256]:
        """Store ``contents`` unless a blob with the same hash already exists.

        Args:
            contents: Raw bytes to store.

        Returns:
            Tuple of (blob id, content hash). Identical contents always
            produce the same id.
        """
        sha256 = SHA256.from_bytes(contents)
        lookup = select(Blob.id).where(Blob.sha256 == sha256.hexdigest)
        existing = await scalar_unique(self._session, lookup, f"blob {sha256}")
        if existing is not None:
            return existing, sha256

        blob = Blob(sha256=sha256.hexdigest, size=len(contents), contents=contents)
        blob_id = await insert_or_select(self._session, blob, lookup, f"blob {sha256}")
        logger.debug("Stored blob %s (%d bytes) as id %d", sha256, len(contents), blob_id)
        return blob_id, sha256

    async def load(self, blob_id: int) -> bytes | None:
        """Return the contents of blob ``blob_id``, or None if there is no such blob."""
        stmt = select(Blob.contents).where(Blob.id == blob_id)
        return await scalar_unique(self._session, stmt, f"blob id {blob_id}")

    async def load_by_hash(self, sha256: SHA256, expected_size: int | None = None) -> bytes | None:
        """Return the contents of the blob with hash ``sha256``.

        Args:
            sha256: Content hash to look up.
            expected_size: Size the caller believes the blob has, if known.

        Returns:
            The blob contents, or None if no blob has this hash.

        Raises:
            BlobSizeMismatchError: If the blob exists but its stored size is
                not ``expected_size``.
            StoreIntegrityError: If the stored contents do not have the stored size.
        """
        stmt = select(Blob.size, Blob.contents).where(Blob.sha256 == sha256.hexdigest)
        result = await self._session.execute(stmt)
        rows = result.all()
        if not rows:
            return None
        if len(rows) > 1:
            raise StoreIntegrityError(f"More than one row stored for blob {sha256}")

        size, contents = rows[0]
        if expected_size is not None and expected_size != size:
            raise BlobSizeMismatchError(sha256, expected_size, size)
        if len(contents) != size:
            raise StoreIntegrityError(
                f"Blob {sha256} holds {len(contents)} bytes but records size {size}"
            )
        return contents
