"""Content-addressed metadata cache storage for a package manager."""

from pantry_store.storage import Storage, StorageSession, init_storage
from pantry_store.types import SHA256, AtRevision, ByContentHash, CabalHash, Latest

__version__ = "0.1.0"

__all__ = [
    "SHA256",
    "AtRevision",
    "ByContentHash",
    "CabalHash",
    "Latest",
    "Storage",
    "StorageSession",
    "__version__",
    "init_storage",
]
