"""
Global middleware and error mapping.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from auth.exceptions import (
    AuthError,
    DuplicateIdentifier,
    InsufficientRole,
    InvalidCredentials,
    InvalidOrExpiredToken,
    PasswordUnchanged,
    UserNotFound,
)
from config.messages import AREAS, AuthMessages, get_messages
from config.settings import config

logger = logging.getLogger(__name__)

# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP = {
    DuplicateIdentifier: status.HTTP_409_CONFLICT,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    InvalidOrExpiredToken: status.HTTP_401_UNAUTHORIZED,
    UserNotFound: status.HTTP_404_NOT_FOUND,
    PasswordUnchanged: status.HTTP_400_BAD_REQUEST,
    InsufficientRole: status.HTTP_403_FORBIDDEN,
}


def messages_for_path(path: str) -> AuthMessages:
    """Pick the message table of the area a request path belongs to."""
    parts = path.strip("/").split("/")
    if len(parts) >= 2 and parts[0] == "api" and parts[1] in AREAS:
        return get_messages(parts[1])
    return get_messages("portal")


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), status.HTTP_400_BAD_REQUEST)
    headers = None
    if isinstance(exc, InvalidOrExpiredToken):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status_code, content=exc.to_dict(), headers=headers)


def register_middleware(app: FastAPI) -> None:
    """Attach app-level middleware and exception handlers."""

    app.add_exception_handler(AuthError, auth_error_handler)

    @app.middleware("http")
    async def unexpected_error_handler(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error_type": "InternalServerError",
                    "message": messages_for_path(request.url.path).internal_error,
                    "details": {"error": str(exc)} if config.debug else {},
                },
            )

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response
