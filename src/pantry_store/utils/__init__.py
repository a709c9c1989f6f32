"""Utility modules for the pantry store."""

from pantry_store.utils.names import normalize_package_name, normalize_version

__all__ = [
    "normalize_package_name",
    "normalize_version",
]
