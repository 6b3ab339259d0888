"""
Auth Service.

Telegram login: verify the signed identity, apply the optional allow-list,
upsert the user and open a session.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from todo_miniapp.core.exceptions import AuthenticationError, AuthorizationError
from todo_miniapp.core.security import TelegramAuthVerifier
from todo_miniapp.repositories.user import UserRepository
from todo_miniapp.schemas.auth import SessionUser, TelegramIdentity
from todo_miniapp.services.base import BaseService
from todo_miniapp.services.session import SessionStore

INVALID_TELEGRAM_AUTH = "Invalid Telegram authentication"
ACCESS_DENIED = "Access denied"


def is_user_allowed(telegram_id: int, allowed_users: Iterable[int]) -> bool:
    """An empty allow-list admits everyone."""
    allowed = set(allowed_users)
    return not allowed or telegram_id in allowed


class AuthService(BaseService):
    """Service for Telegram login."""

    def __init__(
        self,
        session: AsyncSession,
        verifier: TelegramAuthVerifier,
        sessions: SessionStore,
        allowed_users: Iterable[int] = (),
    ) -> None:
        super().__init__(session)
        self.verifier = verifier
        self.sessions = sessions
        self.allowed_users = frozenset(allowed_users)
        self.user_repo = UserRepository(session)

    async def login(self, payload: Mapping[str, Any]) -> tuple[str, SessionUser]:
        """
        Exchange a Telegram identity payload for a session.

        Args:
            payload: Identity fields as posted by the client, including ``hash``

        Returns:
            Tuple of (session token, user context)

        Raises:
            AuthenticationError: If the payload is unsigned, tampered with or stale
            AuthorizationError: If the allow-list is set and excludes this user
        """
        verified = self.verifier.verify(payload)

        try:
            identity = TelegramIdentity.model_validate(verified)
        except PydanticValidationError:
            self._logger.warning("Telegram identity payload is malformed")
            raise AuthenticationError(INVALID_TELEGRAM_AUTH) from None

        if not is_user_allowed(identity.id, self.allowed_users):
            self._logger.warning(
                "Telegram user not on allow-list",
                extra={"telegram_id": identity.id},
            )
            raise AuthorizationError(ACCESS_DENIED)

        user = await self._execute_db_operation(
            "upsert_user",
            self.user_repo.upsert(
                telegram_id=identity.id,
                first_name=identity.first_name,
                last_name=identity.last_name,
                username=identity.username,
            ),
        )
        token = await self.sessions.create(user)

        self._log_operation("User logged in", user_id=user.id, telegram_id=user.telegram_id)
        return token, SessionUser(
            user_id=user.id,
            telegram_id=user.telegram_id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
        )
