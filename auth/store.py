"""
Credential store — persistence of ``User`` records keyed by identifier.

``SqlAlchemyCredentialStore`` is the production implementation.  The
uniqueness of ``users.email`` is enforced by the database; a rejected insert
surfaces as ``DuplicateIdentifier`` so concurrent registrations for the same
identifier cannot both succeed.

``InMemoryCredentialStore`` serves tests and local runs without PostgreSQL.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import DuplicateIdentifier
from auth.models import User

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    async def exists_by_identifier(self, identifier: str) -> bool: ...

    async def find_by_identifier(self, identifier: str) -> Optional[User]: ...

    async def save(self, user: User) -> User: ...

    async def update_password_hash(self, identifier: str, password_hash: str) -> None: ...


class SqlAlchemyCredentialStore:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def exists_by_identifier(self, identifier: str) -> bool:
        result = await self._session.execute(
            select(User.user_id).where(User.email == identifier).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(User.email == identifier)
        )
        return result.scalar_one_or_none()

    async def save(self, user: User) -> User:
        """
        Insert ``user`` inside a savepoint.

        A unique-constraint violation rolls back only the savepoint and is
        raised as ``DuplicateIdentifier``; any other failure propagates.
        """
        try:
            async with self._session.begin_nested():
                self._session.add(user)
                await self._session.flush()
        except IntegrityError as exc:
            logger.info("Insert rejected by unique constraint for %s", user.email)
            raise DuplicateIdentifier() from exc
        return user

    async def update_password_hash(self, identifier: str, password_hash: str) -> None:
        await self._session.execute(
            update(User)
            .where(User.email == identifier)
            .values(password_hash=password_hash)
        )
        await self._session.flush()


class InMemoryCredentialStore:
    """Dict-backed store; check-and-insert is atomic under one lock."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._users: Dict[str, User] = {}

    async def exists_by_identifier(self, identifier: str) -> bool:
        return identifier in self._users

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        return self._users.get(identifier)

    async def save(self, user: User) -> User:
        async with self._lock:
            if user.email in self._users:
                raise DuplicateIdentifier()
            self._users[user.email] = user
        return user

    async def update_password_hash(self, identifier: str, password_hash: str) -> None:
        async with self._lock:
            user = self._users.get(identifier)
            if user is not None:
                user.password_hash = password_hash

    def delete(self, identifier: str) -> None:
        self._users.pop(identifier, None)

    def __len__(self) -> int:
        return len(self._users)
