"""Tests for password verification and the token signer."""

from __future__ import annotations

import bcrypt
import jwt
import pytest

from auth import security
from core.config import AuthConfig
from core.errors import InvalidToken


class TestPasswords:
    def test_verify_matches_hash(self) -> None:
        hashed = bcrypt.hashpw(b"secret-pass", bcrypt.gensalt()).decode("utf-8")

        assert security.verify_password("secret-pass", hashed) is True
        assert security.verify_password("wrong-pass", hashed) is False

    def test_malformed_hash_is_a_mismatch(self) -> None:
        assert security.verify_password("secret-pass", "not-a-bcrypt-hash") is False

    def test_empty_inputs_are_a_mismatch(self) -> None:
        assert security.verify_password("", "whatever") is False
        assert security.verify_password("secret-pass", "") is False


class TestTokenSigner:
    def test_round_trip_recovers_claims(self, signer: security.TokenSigner) -> None:
        token = signer.sign(user_id=7, email="ann@example.com")
        claims = signer.verify(token)

        assert claims["userId"] == 7
        assert claims["email"] == "ann@example.com"
        assert claims["exp"] - claims["iat"] == 3600

    def test_foreign_secret_is_rejected(self, signer: security.TokenSigner) -> None:
        other = security.TokenSigner(secret="another-secret", expiry_seconds=3600)
        token = other.sign(user_id=7, email="ann@example.com")

        with pytest.raises(InvalidToken):
            signer.verify(token)

    def test_expired_token_is_rejected(self, signer: security.TokenSigner) -> None:
        expired = security.TokenSigner(secret="test-secret", expiry_seconds=-10)
        token = expired.sign(user_id=7, email="ann@example.com")

        with pytest.raises(InvalidToken, match="expired"):
            signer.verify(token)

    def test_token_without_identity_is_rejected(self, signer: security.TokenSigner) -> None:
        now = security.now_epoch_s()
        token = jwt.encode({"iat": now, "exp": now + 60}, "test-secret", algorithm="HS256")

        with pytest.raises(InvalidToken):
            signer.verify(token)

    def test_empty_secret_is_refused(self) -> None:
        with pytest.raises(ValueError):
            security.TokenSigner(secret=" ", expiry_seconds=60)

    def test_from_config_defaults(self) -> None:
        built = security.TokenSigner.from_config(None)

        assert built.expiry_seconds == 86400
        assert built.algorithm == "HS256"

    def test_from_config_uses_settings(self) -> None:
        built = security.TokenSigner.from_config(AuthConfig(secret="s3", token_expiry_seconds=5))
        claims = built.verify(built.sign(user_id=1, email="a@example.com"))

        assert claims["exp"] - claims["iat"] == 5


class TestSignerLifecycle:
    def test_init_is_idempotent(self) -> None:
        security.reset_signer()
        try:
            first = security.init_signer(AuthConfig(secret="one"))
            second = security.init_signer(AuthConfig(secret="two"))

            assert first is second
            assert security.signer() is first
        finally:
            security.reset_signer()

    def test_signer_before_init_raises(self) -> None:
        security.reset_signer()

        with pytest.raises(RuntimeError):
            security.signer()
