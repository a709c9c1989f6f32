"""Validation and normalization of package names and versions.

Package names follow the Hackage grammar: one or more alphanumeric
components joined by single hyphens, where every component contains at
least one letter ("base", "text-icu", "http2"; not "1-2" or "foo--bar").

Versions are dot-separated non-negative integers of at most 18 digits
per component. Each component is
normalized to its decimal form so that "01.0" and "1.0" intern to the
same row. Trailing zeros are significant: "1.0" and "1.0.0" are different
versions.
"""

from __future__ import annotations

import re

from pantry_store.errors import InvalidPackageIdentifierError

_NAME_COMPONENT_RE = re.compile(r"^[A-Za-z0-9]*[A-Za-z][A-Za-z0-9]*$")
# Bounded so int() never hits the interpreter's digit limit.
_VERSION_COMPONENT_RE = re.compile(r"^[0-9]{1,18}$")


def normalize_package_name(name: str) -> str:
    """Validate a package name and return it with surrounding whitespace removed.

    Names are case-sensitive, so no case folding is applied.

    Raises:
        InvalidPackageIdentifierError: If the name is not a valid package name.
    """
    stripped = name.strip()
    components = stripped.split("-")
    if not stripped or not all(_NAME_COMPONENT_RE.match(part) for part in components):
        raise InvalidPackageIdentifierError(f"Invalid package name: {name!r}")
    return stripped


def normalize_version(version: str) -> str:
    """Validate a version string and return its canonical form.

    Examples:
        "1.0" -> "1.0"
        "01.002" -> "1.2"
        " 0.1.0.0 " -> "0.1.0.0"

    Raises:
        InvalidPackageIdentifierError: If the version is not dot-separated integers.
    """
    components = version.strip().split(".")
    if not all(_VERSION_COMPONENT_RE.match(part) for part in components):
        raise InvalidPackageIdentifierError(f"Invalid package version: {version!r}")
    return ".".join(str(int(part)) for part in components)
