"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.

bcrypt only reads the first 72 bytes of its input, so every password is
first reduced to a base64-encoded SHA-256 digest (44 bytes).  Two passwords
verify against the same hash only if their digests collide.
"""

from __future__ import annotations

import base64
import hashlib
import secrets
from typing import Optional

import bcrypt

DEFAULT_ROUNDS = 12


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


class PasswordHasher:
    """bcrypt hasher bound to a fixed work factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash.

        A malformed or empty hash is a failed verification, not an error.
        """
        try:
            return bcrypt.checkpw(_prehash(password), password_hash.encode())
        except (ValueError, TypeError, AttributeError):
            return False

    def verify_dummy(self, password: str) -> None:
        """Run one verification against a throwaway hash.

        Lets callers spend the same time on an unknown account as on a
        wrong password.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_hex(16))
        self.verify(password, self._dummy_hash)
