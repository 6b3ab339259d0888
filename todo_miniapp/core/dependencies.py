"""
FastAPI Dependencies.

Shared dependencies for request handling. The session cookie is resolved
here, at the API boundary, and the resulting user context is handed to
endpoints explicitly.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from todo_miniapp.core.config import get_app_config, get_settings
from todo_miniapp.core.database import get_db_session
from todo_miniapp.core.exceptions import AuthenticationError
from todo_miniapp.core.security import TelegramAuthVerifier
from todo_miniapp.schemas.auth import SessionUser
from todo_miniapp.services.session import SessionStore

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_verifier() -> TelegramAuthVerifier:
    """Credential verifier built from the bot token and security.yaml."""
    return TelegramAuthVerifier(
        bot_token=get_settings().telegram_bot_token,
        max_age_seconds=get_app_config().security.telegram_auth.max_age_seconds,
    )


Verifier = Annotated[TelegramAuthVerifier, Depends(get_verifier)]


def get_session_store(db: DbSession) -> SessionStore:
    """Session store bound to the request's database session."""
    session_config = get_app_config().security.session
    return SessionStore(
        db,
        ttl_seconds=session_config.ttl_seconds,
        sliding=session_config.sliding,
    )


Sessions = Annotated[SessionStore, Depends(get_session_store)]


def get_session_token(request: Request) -> str | None:
    """Read the session token from the configured cookie."""
    cookie_name = get_app_config().security.session.cookie_name
    return request.cookies.get(cookie_name)


SessionToken = Annotated[str | None, Depends(get_session_token)]


async def get_optional_user(token: SessionToken, sessions: Sessions) -> SessionUser | None:
    """Resolve the session cookie; None when there is no valid session."""
    return await sessions.resolve(token)


OptionalUser = Annotated[SessionUser | None, Depends(get_optional_user)]


async def get_current_user(user: OptionalUser) -> SessionUser:
    """
    Require a valid session.

    Raises:
        AuthenticationError: If the cookie is missing, unknown or expired
    """
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


CurrentUser = Annotated[SessionUser, Depends(get_current_user)]
