"""Source distribution descriptors for Hackage packages."""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.models.hackage import HackageTarball
from pantry_store.services.interner import PackageInterner
from pantry_store.types import SHA256
from pantry_store.utils.unique import insert_or_select, scalar_unique

logger = logging.getLogger(__name__)


class HackageTarballIndex:
    """Service keeping one (hash, size) tarball descriptor per package version.

    Unlike cabal files, tarballs are not revised, so storing a descriptor
    replaces whatever was recorded before.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service with a database session."""
        self._session = session
        self._interner = PackageInterner(session)

    async def store_tarball(self, name: str, version: str, sha256: SHA256, size: int) -> None:
        """Record the tarball hash and size for (name, version), replacing any previous one."""
        if size < 0:
            raise ValueError(f"Tarball size must be non-negative, got {size}")
        name_id = await self._interner.intern_name(name)
        version_id = await self._interner.intern_version(version)

        lookup = select(HackageTarball.id).where(
            HackageTarball.name_id == name_id,
            HackageTarball.version_id == version_id,
        )
        what = f"tarball of {name}-{version}"
        tarball_id = await scalar_unique(self._session, lookup, what)
        if tarball_id is None:
            row = HackageTarball(
                name_id=name_id,
                version_id=version_id,
                sha256=sha256.hexdigest,
                size=size,
            )
            inserted_id = await insert_or_select(self._session, row, lookup, what)
            if inserted_id == row.id:
                logger.debug("Stored tarball %s-%s (%s, %d bytes)", name, version, sha256, size)
                return
            tarball_id = inserted_id

        await self._session.execute(
            update(HackageTarball)
            .where(HackageTarball.id == tarball_id)
            .values(sha256=sha256.hexdigest, size=size)
        )
        logger.debug("Replaced tarball %s-%s with (%s, %d bytes)", name, version, sha256, size)

    async def load_tarball(self, name: str, version: str) -> tuple[SHA256, int] | None:
        """Return the (hash, size) recorded for (name, version), or None."""
        name_id = await self._interner.find_name_id(name)
        version_id = await self._interner.find_version_id(version)
        if name_id is None or version_id is None:
            return None

        stmt = select(HackageTarball.sha256, HackageTarball.size).where(
            HackageTarball.name_id == name_id,
            HackageTarball.version_id == version_id,
        )
        row = (await self._session.execute(stmt)).first()
        if row is None:
            return None
        return SHA256(row.sha256), row.size
