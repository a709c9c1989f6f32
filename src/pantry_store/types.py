"""Value types shared by the storage services."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Union

from pantry_store.errors import InvalidPackageIdentifierError

_HEX_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True)
class SHA256:
    """A SHA-256 digest, held as 64 lowercase hex characters."""

    hexdigest: str

    def __post_init__(self) -> None:
        normalized = self.hexdigest.strip().lower()
        if not _HEX_DIGEST_RE.match(normalized):
            raise ValueError(f"Not a SHA-256 hex digest: {self.hexdigest!r}")
        object.__setattr__(self, "hexdigest", normalized)

    @classmethod
    def from_bytes(cls, data: bytes) -> SHA256:
        """Hash ``data`` and return its digest."""
        return cls(hashlib.sha256(data).hexdigest())

    def __str__(self) -> str:
        return self.hexdigest


@dataclass(frozen=True)
class CabalHash:
    """Content hash of a cabal file, optionally with its size in bytes."""

    sha256: SHA256
    size: int | None = None


@dataclass(frozen=True)
class Latest:
    """Select the newest revision of a cabal file."""


@dataclass(frozen=True)
class AtRevision:
    """Select one exact revision number of a cabal file."""

    revision: int

    def __post_init__(self) -> None:
        if self.revision < 0:
            raise InvalidPackageIdentifierError(
                f"Revision numbers start at 0, got {self.revision}"
            )


@dataclass(frozen=True)
class ByContentHash:
    """Select a cabal file by its content hash, ignoring name and version."""

    sha256: SHA256
    size: int | None = None


CabalFileInfo = Union[Latest, AtRevision, ByContentHash]
