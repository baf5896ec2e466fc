"""
JWT-style token creation and verification.

Tokens are url-safe base64-encoded JSON payloads signed with HMAC-SHA256::

    <base64(payload)>.<hex signature over base64(payload)>

Payload claims: ``sub`` (identifier), ``role``, ``iat`` and ``exp`` (epoch
seconds, fractional when the clock is).  The secret is handed to
``TokenIssuer`` once at startup (``config.jwt_secret``, env var
``JWT_SECRET``) and never changes afterwards.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
import json
import logging
import time
from base64 import urlsafe_b64decode, urlsafe_b64encode
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    identifier: str
    role: str
    issued_at: float
    expires_at: float


class TokenIssuer:
    """Issues and verifies signed, time-bounded identity tokens."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("Token ttl must be positive")
        self._secret = secret.encode()
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def _sign(self, encoded: bytes) -> str:
        return hmac.new(self._secret, encoded, hashlib.sha256).hexdigest()

    def issue(self, identifier: str, role: str, ttl: Optional[int] = None) -> str:
        """Create a signed token for ``identifier`` / ``role``."""
        now = self._clock()
        payload = {
            "sub": identifier,
            "role": role,
            "iat": now,
            "exp": now + (ttl if ttl is not None else self._ttl),
        }
        raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode()
        encoded = urlsafe_b64encode(raw)
        return encoded.decode() + "." + self._sign(encoded)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """
        Verify ``token`` and return its claims.

        Returns ``None`` for a malformed token, a bad signature, or an
        expired token.  The reason is only logged at debug level.
        """
        try:
            encoded, sig = token.split(".", 1)
        except (AttributeError, ValueError):
            logger.debug("Token rejected: bad format")
            return None

        try:
            encoded_bytes = encoded.encode("ascii")
        except UnicodeEncodeError:
            logger.debug("Token rejected: bad format")
            return None

        if not hmac.compare_digest(sig.encode("ascii", "replace"), self._sign(encoded_bytes).encode()):
            logger.debug("Token rejected: bad signature")
            return None

        try:
            payload = json.loads(urlsafe_b64decode(encoded_bytes))
            claims = TokenClaims(
                identifier=str(payload["sub"]),
                role=str(payload["role"]),
                issued_at=float(payload["iat"]),
                expires_at=float(payload["exp"]),
            )
        except (binascii.Error, ValueError, TypeError, KeyError):
            logger.debug("Token rejected: malformed payload")
            return None

        if self._clock() >= claims.expires_at:
            logger.debug("Token rejected: expired for %s", claims.identifier)
            return None
        return claims
