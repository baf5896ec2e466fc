"""
Auth API routes — register, login, profile, change password.

``build_router(area)`` returns one router per application area; ``main``
mounts the portal at ``/api/portal/auth`` and the dashboard at
``/api/dashboard/auth``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from auth.dependencies import auth_service_dependency, current_user_dependency
from auth.exceptions import InsufficientRole, UserNotFound
from auth.models import User, UserRole
from auth.service import AuthService

logger = logging.getLogger(__name__)


# ── Request / response schemas ─────────────────────────────────────────


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_CamelModel):
    email: str = Field(..., min_length=5, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., alias="firstName", min_length=1, max_length=50)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=50)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class ChangePasswordRequest(_CamelModel):
    old_password: str = Field(..., alias="oldPassword", min_length=1, max_length=128)
    new_password: str = Field(..., alias="newPassword", min_length=8, max_length=128)


class AuthResponse(BaseModel):
    token: str
    message: str


class MessageResponse(BaseModel):
    message: str


class ProfileResponse(_CamelModel):
    email: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    role: str


def _profile(user: User) -> Dict[str, Any]:
    return {
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
    }


# ── Router factory ─────────────────────────────────────────────────────


def build_router(area: str) -> APIRouter:
    """Create the auth router for one application area."""
    router = APIRouter(tags=[f"auth:{area}"])
    get_auth_service = auth_service_dependency(area)
    get_current_user = current_user_dependency(get_auth_service)

    @router.post(
        "/register",
        response_model=AuthResponse,
        status_code=status.HTTP_201_CREATED,
    )
    async def register(
        req: RegisterRequest,
        service: AuthService = Depends(get_auth_service),
    ) -> Dict[str, Any]:
        """Register a new user."""
        token = await service.register(
            req.email, req.password, req.first_name, req.last_name,
        )
        return {"token": token, "message": service.messages.register_success}

    @router.post("/login", response_model=AuthResponse)
    async def login(
        req: LoginRequest,
        service: AuthService = Depends(get_auth_service),
    ) -> Dict[str, Any]:
        """Login with email + password."""
        token = await service.login(req.email, req.password)
        return {"token": token, "message": service.messages.login_success}

    @router.get("/profile", response_model=ProfileResponse)
    async def profile(user: User = Depends(get_current_user)) -> Dict[str, Any]:
        """Profile of the Bearer token's owner."""
        return _profile(user)

    @router.get("/users/{email}", response_model=ProfileResponse)
    async def get_user(
        email: str,
        user: User = Depends(get_current_user),
        service: AuthService = Depends(get_auth_service),
    ) -> Dict[str, Any]:
        """Look up a profile; users may read their own, admins anyone's."""
        target = await service.get_by_identifier(email)
        if target is not None and target.email == user.email:
            return _profile(target)
        if user.role != UserRole.ADMIN.value:
            raise InsufficientRole(UserRole.ADMIN.value, service.messages)
        if target is None:
            raise UserNotFound(service.messages)
        return _profile(target)

    @router.post("/change-password", response_model=MessageResponse)
    async def change_password(
        req: ChangePasswordRequest,
        user: User = Depends(get_current_user),
        service: AuthService = Depends(get_auth_service),
    ) -> Dict[str, Any]:
        await service.change_password(user.email, req.old_password, req.new_password)
        return {"message": service.messages.password_changed}

    return router
