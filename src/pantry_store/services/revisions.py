"""Revision index for Hackage cabal files.

Hackage lets maintainers publish new revisions of a released version's
cabal file. This module keeps, per (package name, version), the ordered
list of those revisions as references into the blob store.

Revision numbering (the one place where ordering matters):
- The first revision stored for a pair is 0, the next 1, and so on.
- The next number is max(revision) + 1 for the pair, not a row count, so a
  gap left by a deleted row can never produce a duplicate number.
- The number is computed while holding a row lock on the package's interned
  name, and the insert happens in the same transaction. Two writers for the
  same package therefore cannot both read the same maximum. On SQLite the
  lock clause is a no-op and the whole transaction is serialised by
  ``BEGIN IMMEDIATE`` instead (see ``pantry_store.db``).
- The only supported way to remove revisions is ``clear_all`` followed by
  re-inserting the full history in order.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.errors import InvalidPackageIdentifierError, StoreIntegrityError
from pantry_store.models.blob import Blob
from pantry_store.models.hackage import HackageCabalRevision
from pantry_store.models.package import PackageName, PackageVersion
from pantry_store.services.blob_store import BlobStore
from pantry_store.services.interner import PackageInterner
from pantry_store.types import SHA256, AtRevision, ByContentHash, CabalFileInfo, CabalHash, Latest

logger = logging.getLogger(__name__)


class HackageRevisionIndex:
    """Service for storing and loading numbered cabal file revisions.

    Usage:
        async with storage.session() as store:
            blob_id, _ = await store.blobs.store(cabal_bytes)
            revision = await store.revisions.store_revision("text", "2.0", blob_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service with a database session."""
        self._session = session
        self._interner = PackageInterner(session)
        self._blobs = BlobStore(session)

    async def clear_all(self) -> int:
        """Delete every stored revision.

        Blobs, names and versions are kept, so re-inserting the same history
        reuses their ids.

        Returns:
            Number of revision rows deleted.
        """
        result = await self._session.execute(delete(HackageCabalRevision))
        logger.info("Cleared %d Hackage cabal revisions", result.rowcount)
        return result.rowcount

    async def store_revision(self, name: str, version: str, blob_id: int) -> int:
        """Append a revision for (name, version) pointing at ``blob_id``.

        Args:
            name: Package name.
            version: Package version.
            blob_id: Id of the cabal file blob, as returned by ``BlobStore.store``.

        Returns:
            The revision number assigned to the new row.

        Raises:
            StoreIntegrityError: If the row cannot be inserted, e.g. the
                revision number is already taken or the blob does not exist.
        """
        name_id = await self._interner.intern_name(name)
        version_id = await self._interner.intern_version(version)

        # Writers for the same package queue on this lock until we commit.
        await self._session.execute(
            select(PackageName.id).where(PackageName.id == name_id).with_for_update()
        )
        next_revision_stmt = select(
            func.coalesce(func.max(HackageCabalRevision.revision) + 1, 0)
        ).where(
            HackageCabalRevision.name_id == name_id,
            HackageCabalRevision.version_id == version_id,
        )
        revision = (await self._session.execute(next_revision_stmt)).scalar_one()

        row = HackageCabalRevision(
            name_id=name_id,
            version_id=version_id,
            revision=revision,
            blob_id=blob_id,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(row)
        except IntegrityError as exc:
            raise StoreIntegrityError(
                f"Could not store revision {revision} of {name}-{version} (blob id {blob_id})"
            ) from exc

        logger.debug("Stored %s-%s revision %d as blob id %d", name, version, revision, blob_id)
        return revision

    async def load_versions(self, name: str) -> dict[str, dict[int, CabalHash]]:
        """Load the cabal file hash of every known revision of every version of ``name``.

        Returns:
            Mapping of version to a mapping of revision number to cabal hash.
            Empty if nothing is stored for the package.
        """
        name_id = await self._interner.find_name_id(name)
        if name_id is None:
            return {}

        stmt = (
            select(
                PackageVersion.version,
                HackageCabalRevision.revision,
                Blob.sha256,
                Blob.size,
            )
            .join(PackageVersion, HackageCabalRevision.version_id == PackageVersion.id)
            .join(Blob, HackageCabalRevision.blob_id == Blob.id)
            .where(HackageCabalRevision.name_id == name_id)
            .order_by(PackageVersion.id, HackageCabalRevision.revision)
        )
        result = await self._session.execute(stmt)

        versions: dict[str, dict[int, CabalHash]] = {}
        for version, revision, sha256, size in result.all():
            versions.setdefault(version, {})[revision] = CabalHash(SHA256(sha256), size)
        return versions

    async def load_cabal_file(
        self,
        name: str,
        version: str,
        selector: CabalFileInfo,
    ) -> bytes | None:
        """Load the contents of one cabal file revision.

        Args:
            name: Package name.
            version: Package version.
            selector: ``Latest()``, ``AtRevision(n)`` or ``ByContentHash(sha256, size)``.
                A content hash lookup ignores ``name`` and ``version``.

        Returns:
            The cabal file contents, or None if nothing matches.

        Raises:
            BlobSizeMismatchError: For a content hash lookup whose size does
                not match the stored blob.
            InvalidPackageIdentifierError: If ``selector`` is not one of the above.
        """
        if isinstance(selector, ByContentHash):
            return await self._blobs.load_by_hash(selector.sha256, selector.size)
        if not isinstance(selector, (Latest, AtRevision)):
            raise InvalidPackageIdentifierError(f"Unsupported cabal file selector: {selector!r}")

        name_id = await self._interner.find_name_id(name)
        version_id = await self._interner.find_version_id(version)
        if name_id is None or version_id is None:
            return None

        stmt = (
            select(Blob.contents)
            .join(HackageCabalRevision, HackageCabalRevision.blob_id == Blob.id)
            .where(
                HackageCabalRevision.name_id == name_id,
                HackageCabalRevision.version_id == version_id,
            )
        )
        if isinstance(selector, Latest):
            stmt = stmt.order_by(HackageCabalRevision.revision.desc()).limit(1)
        else:
            stmt = stmt.where(HackageCabalRevision.revision == selector.revision)

        result = await self._session.execute(stmt)
        return result.scalars().first()
