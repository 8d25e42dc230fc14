"""
Tests for password hashing and session tokens (entrystore.core.security).
"""

import hashlib
from datetime import timedelta

import pytest
from jose import JWTError

from entrystore.core.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Tests for hash_password and verify_password."""

    def test_hash_password_uses_default_scheme(self, test_settings):
        hashed = hash_password("1234", test_settings)

        assert hashed.startswith("$pbkdf2-sha256$")
        assert "1234" not in hashed

    def test_verify_password_correct_returns_true(self, test_settings):
        hashed = hash_password("1234", test_settings)

        assert verify_password("1234", hashed, test_settings) is True

    def test_verify_password_wrong_returns_false(self, test_settings):
        hashed = hash_password("1234", test_settings)

        assert verify_password("wrong", hashed, test_settings) is False

    def test_hash_password_different_each_time(self, test_settings):
        """Same password should produce different hashes (salt)."""
        assert hash_password("1234", test_settings) != hash_password("1234", test_settings)

    def test_legacy_sha256_hex_digest_verifies(self, test_settings):
        """Unsalted SHA-256 hex digests from older records still verify."""
        legacy = hashlib.sha256("1234".encode("utf-8")).hexdigest()

        assert verify_password("1234", legacy, test_settings) is True
        assert verify_password("12345", legacy, test_settings) is False

    def test_unrecognised_hash_never_verifies(self, test_settings):
        assert verify_password("1234", "not-a-hash", test_settings) is False

    def test_configured_scheme_is_used(self, test_settings):
        """The first configured scheme hashes new passwords."""
        settings = test_settings.model_copy(update={"password_schemes": ["hex_sha256"]})

        hashed = hash_password("1234", settings)

        assert hashed == hashlib.sha256(b"1234").hexdigest()
        assert len(hashed) == 64


class TestSessionTokens:
    """Tests for create_session_token and decode_session_token."""

    def test_token_round_trip_carries_username(self, test_settings):
        token = create_session_token("alice", settings=test_settings)

        payload = decode_session_token(token, test_settings)

        assert payload["sub"] == "alice"
        assert payload["exp"] > payload["iat"]

    def test_expired_token_rejected(self, test_settings):
        token = create_session_token(
            "alice", expires_delta=timedelta(seconds=-10), settings=test_settings
        )

        with pytest.raises(JWTError):
            decode_session_token(token, test_settings)

    def test_token_signed_with_other_key_rejected(self, test_settings):
        other = test_settings.model_copy(update={"session_secret_key": "another-secret"})
        token = create_session_token("alice", settings=other)

        with pytest.raises(JWTError):
            decode_session_token(token, test_settings)
