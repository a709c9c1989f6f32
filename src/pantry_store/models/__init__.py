"""Database models for the pantry store."""

from pantry_store.models.base import Base
from pantry_store.models.blob import Blob
from pantry_store.models.cache_update import CacheUpdate
from pantry_store.models.hackage import HackageCabalRevision, HackageTarball
from pantry_store.models.package import PackageName, PackageVersion

__all__ = [
    "Base",
    "Blob",
    "CacheUpdate",
    "HackageCabalRevision",
    "HackageTarball",
    "PackageName",
    "PackageVersion",
]
