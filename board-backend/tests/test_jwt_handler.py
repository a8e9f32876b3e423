"""
Tests for access token issue/verify
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from common.auth.jwt_handler import ACCESS_TOKEN_LIFETIME, TokenService
from common.errors import AuthException

SECRET = "unit-test-secret"
ISSUED = datetime(2026, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


class TestIssueAndVerify:
    """Valid tokens."""

    def setup_method(self):
        self.service = TokenService(SECRET)

    def test_verify_returns_issued_identity(self):
        token = self.service.issue("alice", "앨리스", now=ISSUED)

        result = self.service.verify(token, now=ISSUED + timedelta(minutes=1))

        assert result.subject_id == "alice"
        assert result.nickname == "앨리스"
        assert result.issued_at == ISSUED
        assert result.expires_at == ISSUED + timedelta(hours=12)

    def test_lifetime_is_twelve_hours(self):
        assert ACCESS_TOKEN_LIFETIME == timedelta(hours=12)

    def test_claims_are_signed_hs256(self):
        token = self.service.issue("alice", "앨리스", now=ISSUED)

        header = jwt.get_unverified_header(token)
        claims = jwt.get_unverified_claims(token)

        assert header["alg"] == "HS256"
        assert claims["sub"] == "alice"
        assert claims["exp"] - claims["iat"] == 12 * 3600

    def test_valid_one_second_before_expiry(self):
        token = self.service.issue("alice", "앨리스", now=ISSUED)

        result = self.service.verify(token, now=ISSUED + timedelta(hours=12) - timedelta(seconds=1))

        assert result.subject_id == "alice"

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            TokenService("")


class TestRejectedTokens:
    """Every rejection is an AuthException (401)."""

    def setup_method(self):
        self.service = TokenService(SECRET)
        self.token = self.service.issue("alice", "앨리스", now=ISSUED)

    def _assert_rejected(self, token, now=None):
        with pytest.raises(AuthException) as exc_info:
            self.service.verify(token, now=now or ISSUED + timedelta(minutes=1))
        assert exc_info.value.status_code == 401

    def test_rejected_exactly_at_expiry(self):
        self._assert_rejected(self.token, now=ISSUED + timedelta(hours=12))

    def test_rejected_after_expiry(self):
        self._assert_rejected(self.token, now=ISSUED + timedelta(hours=13))

    def test_wrong_secret(self):
        other = TokenService("another-secret").issue("alice", "앨리스", now=ISSUED)
        self._assert_rejected(other)

    def test_tampered_payload(self):
        header, _, signature = self.token.split(".")
        forged_payload = TokenService("x").issue("mallory", "말로리", now=ISSUED).split(".")[1]
        self._assert_rejected(f"{header}.{forged_payload}.{signature}")

    def test_truncated_token(self):
        self._assert_rejected(self.token[:-5])

    @pytest.mark.parametrize("token", [None, "", "not-a-token", "a.b", "a.b.c"])
    def test_malformed_token(self, token):
        self._assert_rejected(token)

    def test_missing_nickname_claim(self):
        token = jwt.encode(
            {"sub": "alice", "iat": int(ISSUED.timestamp()), "exp": int(ISSUED.timestamp()) + 60},
            SECRET,
            algorithm="HS256",
        )
        self._assert_rejected(token, now=ISSUED)
