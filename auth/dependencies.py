"""
FastAPI dependencies for authentication.

The password hasher and token issuer are process-wide and built once from
settings; the credential store and ``AuthService`` are built per request
around the request's DB session.
"""

from __future__ import annotations

from functools import lru_cache
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import InvalidOrExpiredToken
from auth.jwt import TokenIssuer
from auth.models import User
from auth.password import PasswordHasher
from auth.service import AuthService
from auth.store import CredentialStore, SqlAlchemyCredentialStore
from config.messages import get_messages
from config.settings import config
from database.session import get_db_session

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=config.bcrypt_rounds)


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(secret=config.jwt_secret, ttl_seconds=config.jwt_expiry_seconds)


async def get_credential_store(
    session: AsyncSession = Depends(db_session),
) -> CredentialStore:
    return SqlAlchemyCredentialStore(session)


def auth_service_dependency(area: str) -> Callable[..., AuthService]:
    """Build a dependency yielding an ``AuthService`` speaking *area*'s messages."""
    messages = get_messages(area)

    async def get_auth_service(
        store: CredentialStore = Depends(get_credential_store),
        hasher: PasswordHasher = Depends(get_password_hasher),
        tokens: TokenIssuer = Depends(get_token_issuer),
    ) -> AuthService:
        return AuthService(store, hasher, tokens, messages)

    return get_auth_service


def current_user_dependency(
    get_auth_service: Callable[..., AuthService],
) -> Callable[..., User]:
    """
    Build a dependency that resolves the Bearer token to a ``User``.

    Missing, malformed, expired and orphaned tokens all give the same 401.
    """

    async def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
        service: AuthService = Depends(get_auth_service),
    ) -> User:
        if credentials is None:
            raise InvalidOrExpiredToken(service.messages)
        user = await service.resolve_identity(credentials.credentials)
        if user is None:
            raise InvalidOrExpiredToken(service.messages)
        return user

    return get_current_user
