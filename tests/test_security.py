# ============================================================================
# FILE: tests/test_security.py
# ============================================================================
from datetime import timedelta
from types import SimpleNamespace

import pytest

from app.core.security import (
    TokenSigner, TokenVerificationError, get_password_hash, verify_password,
)


def test_password_hash_round_trip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_verify_password_handles_bad_input():
    assert not verify_password("", get_password_hash("x"))
    assert not verify_password("secret", "")
    assert not verify_password("secret", "not-a-hash")


class TestTokenSigner:

    signer = TokenSigner()
    user = SimpleNamespace(id="u-1", username="ada", email="ada@mail.test", fullname="Ada")

    def test_sign_and_verify(self):
        token = self.signer.sign({"sub": "u-1"}, "k", timedelta(minutes=1))
        assert self.signer.verify(token, "k")["sub"] == "u-1"

    def test_expired_token(self):
        token = self.signer.sign({"sub": "u-1"}, "k", timedelta(seconds=-5))
        with pytest.raises(TokenVerificationError, match="expired"):
            self.signer.verify(token, "k")

    def test_wrong_secret(self):
        token = self.signer.sign({"sub": "u-1"}, "k", timedelta(minutes=1))
        with pytest.raises(TokenVerificationError):
            self.signer.verify(token, "other")

    def test_token_types_are_not_interchangeable(self):
        access = self.signer.create_access_token(self.user)
        refresh = self.signer.create_refresh_token(self.user)

        with pytest.raises(TokenVerificationError):
            self.signer.decode_refresh_token(access)
        with pytest.raises(TokenVerificationError):
            self.signer.decode_access_token(refresh)

    def test_refresh_tokens_are_unique(self):
        assert self.signer.create_refresh_token(self.user) != self.signer.create_refresh_token(self.user)
