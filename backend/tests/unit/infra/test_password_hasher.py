"""Unit tests for the Werkzeug password hasher adapter."""

from __future__ import annotations

import pytest

from taskboard.infra.security.password_hasher import (
    CredentialHashingError,
    WerkzeugPasswordHasher,
)


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")


class TestWerkzeugPasswordHasher:
    def test_hash_is_salted_and_verifiable(self, hasher):
        """Given the same password twice, the hashes differ but both verify."""
        first = hasher.hash("s3cret-pass")
        second = hasher.hash("s3cret-pass")

        assert first != second
        assert "s3cret-pass" not in first
        assert hasher.verify(first, "s3cret-pass")
        assert hasher.verify(second, "s3cret-pass")

    def test_wrong_password_does_not_verify(self, hasher):
        stored = hasher.hash("s3cret-pass")

        assert hasher.verify(stored, "other-pass") is False

    @pytest.mark.parametrize("stored", [None, ""])
    def test_missing_hash_never_verifies(self, hasher, stored):
        """Given no stored hash, verification runs against a decoy and fails."""
        assert hasher.verify(stored, "anything") is False

    def test_malformed_hash_does_not_raise(self, hasher):
        assert hasher.verify("pbkdf2:nonsense", "anything") is False

    def test_unknown_method_raises_hashing_error(self):
        broken = WerkzeugPasswordHasher(method="no-such-method")

        with pytest.raises(CredentialHashingError):
            broken.hash("s3cret-pass")
