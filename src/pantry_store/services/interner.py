"""Interning of package names and versions into numeric surrogate keys.

Every other table refers to names and versions by id. Interning is a
get-or-insert against the unique value column: the first caller for a value
creates the row and every later caller, concurrent ones included, gets the
same id back.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pantry_store.models.package import PackageName, PackageVersion
from pantry_store.utils.names import normalize_package_name, normalize_version
from pantry_store.utils.unique import insert_or_select, scalar_unique


class PackageInterner:
    """Service mapping package names and versions to stable ids.

    Usage:
        async with storage.session() as store:
            name_id = await store.interner.intern_name("text")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the service with a database session."""
        self._session = session

    async def intern_name(self, name: str) -> int:
        """Return the id for ``name``, creating the row on first use.

        Raises:
            InvalidPackageIdentifierError: If the name is malformed.
        """
        normalized = normalize_package_name(name)
        lookup = select(PackageName.id).where(PackageName.name == normalized)
        existing = await scalar_unique(self._session, lookup, f"package name {normalized!r}")
        if existing is not None:
            return existing
        return await insert_or_select(
            self._session, PackageName(name=normalized), lookup, f"package name {normalized!r}"
        )

    async def intern_version(self, version: str) -> int:
        """Return the id for ``version``, creating the row on first use.

        Raises:
            InvalidPackageIdentifierError: If the version is malformed.
        """
        normalized = normalize_version(version)
        lookup = select(PackageVersion.id).where(PackageVersion.version == normalized)
        existing = await scalar_unique(self._session, lookup, f"version {normalized!r}")
        if existing is not None:
            return existing
        return await insert_or_select(
            self._session, PackageVersion(version=normalized), lookup, f"version {normalized!r}"
        )

    async def find_name_id(self, name: str) -> int | None:
        """Look up the id of an already interned name without creating it."""
        normalized = normalize_package_name(name)
        stmt = select(PackageName.id).where(PackageName.name == normalized)
        return await scalar_unique(self._session, stmt, f"package name {normalized!r}")

    async def find_version_id(self, version: str) -> int | None:
        """Look up the id of an already interned version without creating it."""
        normalized = normalize_version(version)
        stmt = select(PackageVersion.id).where(PackageVersion.version == normalized)
        return await scalar_unique(self._session, stmt, f"version {normalized!r}")
