"""
Authentication service — registration, login and identity resolution.

One service handles every application area; the area only decides which
message table is used for the errors raised here.

bcrypt work is pushed to a worker thread with ``asyncio.to_thread()`` so it
never blocks the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from auth.exceptions import (
    DuplicateIdentifier,
    InvalidCredentials,
    PasswordUnchanged,
    UserNotFound,
)
from auth.jwt import TokenIssuer
from auth.models import User, UserRole
from auth.password import PasswordHasher
from auth.store import CredentialStore
from config.messages import AuthMessages, get_messages

logger = logging.getLogger(__name__)


def normalize_identifier(identifier: str) -> str:
    """Trim and case-fold an email so lookups are case-insensitive."""
    return (identifier or "").strip().casefold()


class AuthService:
    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        messages: Optional[AuthMessages] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.messages = messages or get_messages("portal")

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self.hasher.hash, password)

    async def _verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.hasher.verify, password, password_hash)

    async def register(
        self,
        identifier: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> str:
        """Create a user with role ``USER`` and return a fresh token."""
        email = normalize_identifier(identifier)

        if await self.store.exists_by_identifier(email):
            raise DuplicateIdentifier(self.messages)

        user = User(
            user_id=uuid.uuid4(),
            email=email,
            password_hash=await self._hash(password),
            first_name=first_name,
            last_name=last_name,
            role=UserRole.USER.value,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self.store.save(user)
        except DuplicateIdentifier:
            # Lost the race against a concurrent registration.
            raise DuplicateIdentifier(self.messages) from None

        logger.info("Registered user %s", email)
        return self.tokens.issue(email, user.role)

    async def login(self, identifier: str, password: str) -> str:
        """Check credentials and return a fresh token."""
        email = normalize_identifier(identifier)
        user = await self.store.find_by_identifier(email)

        if user is None:
            await asyncio.to_thread(self.hasher.verify_dummy, password)
            logger.info("Login failed for %s", email)
            raise InvalidCredentials(self.messages)

        if not await self._verify(password, user.password_hash):
            logger.info("Login failed for %s", email)
            raise InvalidCredentials(self.messages)

        logger.info("Login: %s", email)
        return self.tokens.issue(email, user.role)

    async def resolve_identity(self, token: str) -> Optional[User]:
        """Return the user a valid token belongs to, or ``None``."""
        claims = self.tokens.verify(token)
        if claims is None:
            return None
        return await self.store.find_by_identifier(claims.identifier)

    async def get_by_identifier(self, identifier: str) -> Optional[User]:
        return await self.store.find_by_identifier(normalize_identifier(identifier))

    async def change_password(
        self,
        identifier: str,
        old_password: str,
        new_password: str,
    ) -> None:
        """Replace the password hash after re-checking the current password."""
        email = normalize_identifier(identifier)
        user = await self.store.find_by_identifier(email)
        if user is None:
            raise UserNotFound(self.messages)

        if not await self._verify(old_password, user.password_hash):
            raise InvalidCredentials(self.messages)
        if old_password == new_password:
            raise PasswordUnchanged(self.messages)

        await self.store.update_password_hash(email, await self._hash(new_password))
        logger.info("Password changed for %s", email)
