"""Pantry store exception hierarchy.

Lookups that find nothing return ``None`` and never raise. Everything here
describes a failure the caller has to see. Errors from the database driver
itself are not wrapped and reach the caller as SQLAlchemy exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pantry_store.types import SHA256


class PantryStoreError(Exception):
    """Base exception for all pantry store failures."""


class StoreIntegrityError(PantryStoreError):
    """Raised when stored rows violate a uniqueness or consistency invariant."""


class BlobSizeMismatchError(PantryStoreError):
    """Raised when a blob exists for a hash but its stored size differs."""

    def __init__(self, sha256: SHA256, expected_size: int, actual_size: int) -> None:
        self.sha256 = sha256
        self.expected_size = expected_size
        self.actual_size = actual_size
        super().__init__(
            f"Blob {sha256} is stored with size {actual_size}, "
            f"but size {expected_size} was expected"
        )


class InvalidPackageIdentifierError(PantryStoreError, ValueError):
    """Raised for malformed package names, versions or revision selectors."""


class StorageMigrationError(PantryStoreError):
    """Raised when the schema cannot be brought up to date at startup."""
