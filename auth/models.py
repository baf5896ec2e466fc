"""This module re-exports the User model from the database package and defines
the role labels used by authentication code.
"""

from __future__ import annotations

from enum import Enum

from database.models import User  # noqa: F401


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


__all__ = ["User", "UserRole"]
