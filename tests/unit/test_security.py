"""
Unit Tests - Tokens and Passwords
"""
from datetime import timedelta

import jwt

from storefront.config import get_settings
from storefront.security import (
    decode,
    hash_password,
    issue_confirmation_token,
    issue_session_token,
    sign,
    verify_password,
)


class TestTokenCodec:
    """Tests for sign/decode"""

    def test_session_token_round_trip(self):
        token = issue_session_token(7, "Jane", "jane@example.com")
        payload = decode(token)

        assert payload["user"] == {"customer_id": 7, "name": "Jane", "email": "jane@example.com"}
        assert "exp" in payload

    def test_confirmation_token_has_no_expiry(self):
        payload = decode(issue_confirmation_token(7, 42))

        assert payload == {"customer_id": 7, "order_id": 42}

    def test_expired_token_rejected(self):
        token = sign({"order_id": 1}, expires_in=timedelta(seconds=-10))

        assert decode(token) is None

    def test_foreign_signature_rejected(self):
        token = jwt.encode({"order_id": 1}, "some-other-secret-that-is-long-enough", algorithm="HS256")

        assert decode(token) is None

    def test_garbage_rejected(self):
        assert decode("not-a-token") is None
        assert decode("") is None
        assert decode(None) is None

    def test_uses_configured_algorithm(self):
        header = jwt.get_unverified_header(sign({"order_id": 1}))

        assert header["alg"] == get_settings().security.jwt_algorithm


class TestPasswords:
    """Tests for bcrypt hashing"""

    def test_hash_verifies(self):
        hashed = hash_password("s3cret")

        assert hashed != "s3cret"
        assert verify_password("s3cret", hashed)

    def test_wrong_password(self):
        assert not verify_password("wrong", hash_password("s3cret"))

    def test_malformed_hash_never_matches(self):
        assert not verify_password("s3cret", "plain-text")
