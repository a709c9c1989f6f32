"""Hackage index models: cabal file revisions and tarball descriptors."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from pantry_store.models.base import Base


class HackageCabalRevision(Base):
    """One published revision of a package version's cabal file.

    Revisions are numbered from 0 per (name, version) in publication order.
    The table is append-only apart from a full clear before a rebuild of
    the index.
    """

    __tablename__ = "hackage_cabal_revisions"

    id: Mapped[int] = mapped_column(primary_key=True)
    name_id: Mapped[int] = mapped_column(ForeignKey("package_names.id"))
    version_id: Mapped[int] = mapped_column(ForeignKey("package_versions.id"))
    revision: Mapped[int] = mapped_column(Integer)
    blob_id: Mapped[int] = mapped_column(ForeignKey("blobs.id"), index=True)

    __table_args__ = (
        UniqueConstraint("name_id", "version_id", "revision"),
        CheckConstraint("revision >= 0", name="revision_non_negative"),
    )


class HackageTarball(Base):
    """Source distribution descriptor, at most one per (name, version)."""

    __tablename__ = "hackage_tarballs"

    id: Mapped[int] = mapped_column(primary_key=True)
    name_id: Mapped[int] = mapped_column(ForeignKey("package_names.id"))
    version_id: Mapped[int] = mapped_column(ForeignKey("package_versions.id"))
    sha256: Mapped[str] = mapped_column(String(64))
    size: Mapped[int] = mapped_column(BigInteger)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("name_id", "version_id"),
        CheckConstraint("size >= 0", name="size_non_negative"),
    )
