"""Interned package names and versions."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from pantry_store.models.base import Base


class PackageName(Base):
    """A package name, stored once and referenced by id everywhere else."""

    __tablename__ = "package_names"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True)


class PackageVersion(Base):
    """A normalized package version string, stored once."""

    __tablename__ = "package_versions"

    id: Mapped[int] = mapped_column(primary_key=True)
    version: Mapped[str] = mapped_column(String(255), unique=True)
