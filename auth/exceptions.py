"""
Authentication errors.

Hierarchy:
    AuthError (base)
    ├── DuplicateIdentifier
    ├── InvalidCredentials
    ├── InvalidOrExpiredToken
    ├── UserNotFound
    ├── PasswordUnchanged
    └── InsufficientRole

Each maps to one HTTP status in ``api.middleware``.  Messages come from the
area's message table so the same error renders the same text everywhere.
"""

from __future__ import annotations

from typing import Optional

from config.messages import AuthMessages

_DEFAULT_MESSAGES = AuthMessages()


class AuthError(Exception):
    """
    Base class for expected, caller-facing authentication outcomes.

    Attributes:
        message: Human-readable error description
        details: Additional context for API responses
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class DuplicateIdentifier(AuthError):
    """Registration attempted for an identifier that already exists."""

    def __init__(self, messages: AuthMessages = _DEFAULT_MESSAGES):
        super().__init__(messages.email_exists)


class InvalidCredentials(AuthError):
    """Unknown identifier or wrong password; the two are indistinguishable."""

    def __init__(self, messages: AuthMessages = _DEFAULT_MESSAGES):
        super().__init__(messages.invalid_credentials)


class InvalidOrExpiredToken(AuthError):
    def __init__(self, messages: AuthMessages = _DEFAULT_MESSAGES):
        super().__init__(messages.invalid_token)


class UserNotFound(AuthError):
    def __init__(self, messages: AuthMessages = _DEFAULT_MESSAGES):
        super().__init__(messages.user_not_found)


class PasswordUnchanged(AuthError):
    def __init__(self, messages: AuthMessages = _DEFAULT_MESSAGES):
        super().__init__(messages.password_unchanged)


class InsufficientRole(AuthError):
    def __init__(self, required: str, messages: AuthMessages = _DEFAULT_MESSAGES):
        super().__init__(messages.forbidden, details={"required_role": required})
