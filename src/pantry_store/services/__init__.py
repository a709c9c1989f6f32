"""Storage services for the pantry store."""

from pantry_store.services.blob_store import BlobStore
from pantry_store.services.cache_updates import CacheUpdateTracker
from pantry_store.services.interner import PackageInterner
from pantry_store.services.revisions import HackageRevisionIndex
from pantry_store.services.tarballs import HackageTarballIndex

__all__ = [
    "BlobStore",
    "CacheUpdateTracker",
    "HackageRevisionIndex",
    "HackageTarballIndex",
    "PackageInterner",
]
