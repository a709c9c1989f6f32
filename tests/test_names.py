"""Tests for package identifier normalization and value types."""

from __future__ import annotations

import hashlib

import pytest

from pantry_store.errors import InvalidPackageIdentifierError
from pantry_store.types import SHA256, AtRevision
from pantry_store.utils.names import normalize_package_name, normalize_version


class TestNormalizePackageName:
    @pytest.mark.parametrize("name", ["base", "text-icu", "http2", "HUnit", "a1-b2-c3"])
    def test_valid_names_pass_through(self, name: str) -> None:
        assert normalize_package_name(name) == name

    def test_surrounding_whitespace_is_stripped(self) -> None:
        assert normalize_package_name("  lens ") == "lens"

    @pytest.mark.parametrize("name", ["", "1-2", "foo--bar", "-foo", "foo-", "foo bar", "foo_bar"])
    def test_invalid_names_are_rejected(self, name: str) -> None:
        with pytest.raises(InvalidPackageIdentifierError):
            normalize_package_name(name)


class TestNormalizeVersion:
    def test_normalization_cases(self) -> None:
        test_cases = [
            ("1.0", "1.0"),
            ("01.002", "1.2"),
            (" 0.1.0.0 ", "0.1.0.0"),
            ("7", "7"),
        ]

        for raw, expected in test_cases:
            result = normalize_version(raw)
            assert result == expected, f"normalize_version({raw!r}) = {result!r}"
            # Idempotent: normalizing again gives the same result
            assert normalize_version(result) == expected

    @pytest.mark.parametrize("version", ["", "1..0", "1.0-beta", "v1", "1.0."])
    def test_invalid_versions_are_rejected(self, version: str) -> None:
        with pytest.raises(InvalidPackageIdentifierError):
            normalize_version(version)

    def test_oversized_component_is_rejected(self) -> None:
        """Components too long to be real versions fail validation, not int()."""
        with pytest.raises(InvalidPackageIdentifierError):
            normalize_version("1." + "9" * 5000)
        with pytest.raises(InvalidPackageIdentifierError):
            normalize_version("9" * 19)

    def test_long_component_within_bound_is_accepted(self) -> None:
        assert normalize_version("1." + "0" * 17 + "1") == "1.1"

    def test_invalid_identifier_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            normalize_version("x")


class TestSHA256:
    def test_from_bytes_matches_hashlib(self) -> None:
        assert SHA256.from_bytes(b"abc").hexdigest == hashlib.sha256(b"abc").hexdigest()

    def test_hex_is_normalized_to_lowercase(self) -> None:
        digest = hashlib.sha256(b"abc").hexdigest()

        assert SHA256(digest.upper()) == SHA256(digest)
        assert str(SHA256(digest.upper())) == digest

    @pytest.mark.parametrize("value", ["", "abc", "z" * 64, "a" * 63])
    def test_malformed_digest_is_rejected(self, value: str) -> None:
        with pytest.raises(ValueError):
            SHA256(value)


def test_negative_revision_selector_is_rejected() -> None:
    with pytest.raises(InvalidPackageIdentifierError):
        AtRevision(-1)
