"""Storage handle and transactional sessions.

``Storage`` owns the engine. All work goes through ``Storage.session()``,
which runs the body as one transaction and lets only one session run at a
time per ``Storage``:

    storage = await init_storage("sqlite+aiosqlite:///pantry.sqlite3")
    async with storage.session() as store:
        blob_id, _ = await store.store_blob(cabal_bytes)
        await store.store_hackage_revision("text", "2.0", blob_id)

The session commits when the block exits normally and rolls back when it
raises; the exception is re-raised unchanged.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pantry_store.config import settings
from pantry_store.db import create_engine, migrate
from pantry_store.services import (
    BlobStore,
    CacheUpdateTracker,
    HackageRevisionIndex,
    HackageTarballIndex,
    PackageInterner,
)
from pantry_store.types import SHA256, CabalFileInfo, CabalHash

logger = logging.getLogger(__name__)


class StorageSession:
    """The operations available inside one storage transaction."""

    def __init__(self, session: AsyncSession) -> None:
        self.interner = PackageInterner(session)
        self.blobs = BlobStore(session)
        self.revisions = HackageRevisionIndex(session)
        self.tarballs = HackageTarballIndex(session)
        self.cache_updates = CacheUpdateTracker(session)

    async def store_blob(self, contents: bytes) -> tuple[int, SHA256]:
        return await self.blobs.store(contents)

    async def load_blob(self, blob_id: int) -> bytes | None:
        return await self.blobs.load(blob_id)

    async def load_blob_by_hash(self, sha256: SHA256, expected_size: int | None = None) -> bytes | None:
        return await self.blobs.load_by_hash(sha256, expected_size)

    async def intern_name(self, name: str) -> int:
        return await self.interner.intern_name(name)

    async def intern_version(self, version: str) -> int:
        return await self.interner.intern_version(version)

    async def clear_hackage_revisions(self) -> int:
        return await self.revisions.clear_all()

    async def store_hackage_revision(self, name: str, version: str, blob_id: int) -> int:
        return await self.revisions.store_revision(name, version, blob_id)

    async def load_hackage_package_versions(self, name: str) -> dict[str, dict[int, CabalHash]]:
        return await self.revisions.load_versions(name)

    async def load_hackage_cabal_file(
        self, name: str, version: str, selector: CabalFileInfo
    ) -> bytes | None:
        return await self.revisions.load_cabal_file(name, version, selector)

    async def store_hackage_tarball(self, name: str, version: str, sha256: SHA256, size: int) -> None:
        await self.tarballs.store_tarball(name, version, sha256, size)

    async def load_hackage_tarball(self, name: str, version: str) -> tuple[SHA256, int] | None:
        return await self.tarballs.load_tarball(name, version)

    async def store_cache_update(
        self, size: int, sha256: SHA256, *, now: datetime | None = None
    ) -> None:
        await self.cache_updates.record(size, sha256, now=now)

    async def load_latest_cache_update(self) -> tuple[int, SHA256] | None:
        return await self.cache_updates.latest()


class Storage:
    """Handle on an initialized pantry store."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[StorageSession]:
        """Run the enclosed block as a single serialized transaction."""
        async with self._lock:
            async with self._session_factory() as session:
                async with session.begin():
                    yield StorageSession(session)

    async def close(self) -> None:
        """Dispose of the engine and its connections."""
        await self._engine.dispose()


async def init_storage(database_url: str | None = None, *, echo: bool | None = None) -> Storage:
    """Open or create the store at ``database_url`` and bring its schema up to date.

    Args:
        database_url: SQLAlchemy async URL; defaults to ``settings.database_url``.
        echo: Log all SQL; defaults to ``settings.database_echo``.

    Returns:
        A ready to use ``Storage``.

    Raises:
        StorageMigrationError: If the schema cannot be migrated. The engine
            is disposed before the error propagates.
    """
    url = database_url or settings.database_url
    engine = create_engine(
        url,
        echo=settings.database_echo if echo is None else echo,
        pool_size=settings.database_pool_size,
    )
    try:
        await migrate(engine)
    except Exception:
        await engine.dispose()
        raise
    logger.info("Opened pantry storage at %s", engine.url.render_as_string(hide_password=True))
    return Storage(engine)
