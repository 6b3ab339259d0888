"""
Auth API Endpoints.

Telegram login, session check and logout. The session token travels in
an httpOnly cookie.
"""

from typing import Any

from fastapi import APIRouter, Body, Response

from todo_miniapp.core.config import get_app_config
from todo_miniapp.core.dependencies import (
    DbSession,
    OptionalUser,
    Sessions,
    SessionToken,
    Verifier,
)
from todo_miniapp.schemas.auth import AuthResponse, UserRead
from todo_miniapp.schemas.base import ApiResponse
from todo_miniapp.services.auth import AuthService

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    app_config = get_app_config()
    session_config = app_config.security.session
    response.set_cookie(
        key=session_config.cookie_name,
        value=token,
        max_age=session_config.ttl_seconds,
        httponly=True,
        samesite=session_config.same_site,
        secure=session_config.secure_cookie or app_config.application.environment == "production",
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    session_config = get_app_config().security.session
    response.delete_cookie(
        key=session_config.cookie_name,
        path="/",
        httponly=True,
        samesite=session_config.same_site,
    )


@router.post(
    "/telegram",
    response_model=AuthResponse,
    summary="Log in with Telegram",
    description="Verify a signed Telegram identity payload and open a session.",
)
async def login_telegram(
    response: Response,
    db: DbSession,
    verifier: Verifier,
    sessions: Sessions,
    payload: dict[str, Any] = Body(..., description="Telegram identity fields including hash"),
) -> AuthResponse:
    """Log in with a Telegram identity payload."""
    service = AuthService(
        db,
        verifier=verifier,
        sessions=sessions,
        allowed_users=get_app_config().security.allowed_users,
    )
    token, user = await service.login(payload)
    _set_session_cookie(response, token)
    return AuthResponse(user=UserRead.from_session_user(user))


@router.get(
    "/check",
    response_model=AuthResponse,
    summary="Check session",
    description="Report whether the session cookie belongs to a live session.",
)
async def check_auth(user: OptionalUser) -> AuthResponse:
    """Return the current user, or ``success: false`` without a session."""
    if user is None:
        return AuthResponse(success=False, user=None)
    return AuthResponse(user=UserRead.from_session_user(user))


@router.post(
    "/logout",
    response_model=ApiResponse,
    summary="Log out",
    description="Destroy the session and clear the cookie. Always succeeds.",
)
async def logout(
    response: Response,
    token: SessionToken,
    sessions: Sessions,
) -> ApiResponse:
    """Log out."""
    await sessions.destroy(token)
    _clear_session_cookie(response)
    return ApiResponse()
