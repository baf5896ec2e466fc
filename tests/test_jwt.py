"""
Tests for signed token issuing and verification.
"""

import json
from base64 import urlsafe_b64decode, urlsafe_b64encode

import pytest

from auth.jwt import TokenClaims, TokenIssuer

SECRET = "super-secret-token-key-for-testing-only"


class FakeClock:
    def __init__(self, now: int = 1_700_000_000):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def issuer(clock):
    return TokenIssuer(SECRET, ttl_seconds=3600, clock=clock)


def _flip_last_char(text: str) -> str:
    return text[:-1] + ("0" if text[-1] != "0" else "1")


class TestIssue:
    def test_valid_token(self, issuer, clock):
        token = issuer.issue("a@x.com", "USER")
        claims = issuer.verify(token)

        assert isinstance(claims, TokenClaims)
        assert claims.identifier == "a@x.com"
        assert claims.role == "USER"
        assert claims.issued_at == clock.now
        assert claims.expires_at == clock.now + 3600

    def test_payload_is_compact_signed_json(self, issuer):
        encoded, sig = issuer.issue("a@x.com", "ADMIN").split(".")
        payload = json.loads(urlsafe_b64decode(encoded))
        assert set(payload) == {"sub", "role", "iat", "exp"}
        assert len(sig) == 64

    def test_custom_ttl(self, issuer, clock):
        claims = issuer.verify(issuer.issue("a@x.com", "USER", ttl=10))
        assert claims.expires_at - claims.issued_at == 10

    def test_constructor_validation(self):
        with pytest.raises(ValueError):
            TokenIssuer("", ttl_seconds=60)
        with pytest.raises(ValueError):
            TokenIssuer(SECRET, ttl_seconds=0)


class TestExpiry:
    def test_valid_just_before_expiry(self, issuer, clock):
        token = issuer.issue("a@x.com", "USER", ttl=60)
        clock.now += 59
        assert issuer.verify(token) is not None

    def test_invalid_at_expiry(self, issuer, clock):
        token = issuer.issue("a@x.com", "USER", ttl=60)
        clock.now += 60
        assert issuer.verify(token) is None

    def test_invalid_after_expiry(self, issuer, clock):
        token = issuer.issue("a@x.com", "USER", ttl=60)
        clock.now += 3600
        assert issuer.verify(token) is None

    def test_fractional_issue_time_is_not_floored(self, clock):
        clock.now = 1_700_000_000.5
        issuer = TokenIssuer(SECRET, ttl_seconds=10, clock=clock)
        token = issuer.issue("a@x.com", "USER")

        clock.now = 1_700_000_010.4
        assert issuer.verify(token) is not None
        clock.now = 1_700_000_010.5
        assert issuer.verify(token) is None


class TestTampering:
    def test_corrupted_signature(self, issuer):
        token = issuer.issue("a@x.com", "USER")
        assert issuer.verify(_flip_last_char(token)) is None

    def test_wrong_secret(self, clock):
        other = TokenIssuer("another-secret", ttl_seconds=3600, clock=clock)
        token = other.issue("a@x.com", "USER")
        assert TokenIssuer(SECRET, 3600, clock=clock).verify(token) is None

    def test_payload_swap_rejected(self, issuer):
        token = issuer.issue("a@x.com", "USER")
        _, sig = token.split(".")
        forged = json.dumps(
            {"sub": "a@x.com", "role": "ADMIN", "iat": 0, "exp": 9_999_999_999}
        ).encode()
        assert issuer.verify(urlsafe_b64encode(forged).decode() + "." + sig) is None

    @pytest.mark.parametrize(
        "token",
        ["", "no-dot-here", "a.b", "....", "ünïcode.sig", None, 42],
    )
    def test_malformed(self, issuer, token):
        assert issuer.verify(token) is None

    def test_signed_garbage_payload(self, issuer):
        encoded = urlsafe_b64encode(b'["not", "an", "object"]')
        token = encoded.decode() + "." + issuer._sign(encoded)
        assert issuer.verify(token) is None

    def test_signed_payload_missing_claims(self, issuer):
        encoded = urlsafe_b64encode(b'{"sub": "a@x.com"}')
        token = encoded.decode() + "." + issuer._sign(encoded)
        assert issuer.verify(token) is None
