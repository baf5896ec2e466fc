"""
Response messages per application area.

The portal and dashboard share one auth flow; only the wording of a few
responses differs between them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict


@dataclass(frozen=True)
class AuthMessages:
    register_success: str = "User registered successfully"
    login_success: str = "Login successful"
    password_changed: str = "Password changed successfully"
    email_exists: str = "Email already exists"
    invalid_credentials: str = "Invalid email or password"
    invalid_token: str = "Invalid or expired token"
    user_not_found: str = "User not found"
    password_unchanged: str = "New password must be different from the current one"
    forbidden: str = "Access forbidden"
    internal_error: str = "An error occurred. Please try again later."


_PORTAL = AuthMessages()

_CATALOG: Dict[str, AuthMessages] = {
    "portal": _PORTAL,
    "dashboard": replace(
        _PORTAL,
        register_success="Registration successful",
        internal_error="Internal server error",
    ),
}

AREAS = tuple(_CATALOG)


def get_messages(area: str) -> AuthMessages:
    """Return the message table for *area* (``portal`` or ``dashboard``)."""
    try:
        return _CATALOG[area]
    except KeyError:
        raise ValueError(
            f"Unknown area '{area}'. Known areas: {', '.join(AREAS)}"
        ) from None
