"""
Session Store.

Maps opaque session tokens to user context. The token goes to the
client in a cookie; the database keeps only its SHA-256 hash together
with cached display fields, so resolving a session needs no join.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from todo_miniapp.core.security import generate_session_token
from todo_miniapp.core.utils import sha256_hex, utc_now
from todo_miniapp.models.user import User
from todo_miniapp.repositories.session import SessionRepository
from todo_miniapp.schemas.auth import SessionUser
from todo_miniapp.services.base import BaseService

DEFAULT_SESSION_TTL_SECONDS = 86400


class SessionStore(BaseService):
    """
    Token to user-context store with a fixed or sliding lifetime.

    Usage:
        store = SessionStore(db, ttl_seconds=86400)
        token = await store.create(user)
        current = await store.resolve(token)   # SessionUser or None
        await store.destroy(token)
    """

    def __init__(
        self,
        session: AsyncSession,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        sliding: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        super().__init__(session)
        self.repo = SessionRepository(session)
        self.ttl = timedelta(seconds=ttl_seconds)
        self.sliding = sliding
        self._clock = clock

    async def create(self, user: User) -> str:
        """
        Open a session for ``user``.

        Returns:
            The new opaque token. It is not stored and cannot be recovered.
        """
        token = generate_session_token()
        expires_at = self._clock() + self.ttl

        await self._execute_db_operation(
            "create_session",
            self.repo.create(
                token_hash=sha256_hex(token),
                user_id=user.id,
                telegram_id=user.telegram_id,
                first_name=user.first_name,
                last_name=user.last_name,
                username=user.username,
                expires_at=expires_at,
            ),
        )

        self._log_operation("Session created", user_id=user.id, expires_at=expires_at.isoformat())
        return token

    async def resolve(self, token: str | None) -> SessionUser | None:
        """
        Look up the user context behind ``token``.

        Unknown, empty and expired tokens resolve to None. An expired
        session is deleted on the way out. With sliding enabled a hit
        pushes the expiry one TTL forward.
        """
        if not token:
            return None

        token_hash = sha256_hex(token)
        record = await self._execute_db_operation(
            "resolve_session",
            self.repo.get_by_token_hash(token_hash),
        )
        if record is None:
            return None

        now = self._clock()
        if record.expires_at <= now:
            self._log_debug("Session expired", user_id=record.user_id)
            await self._execute_db_operation(
                "expire_session",
                self.repo.delete_by_token_hash(token_hash),
            )
            return None

        if self.sliding:
            await self._execute_db_operation(
                "extend_session",
                self.repo.extend(token_hash, now + self.ttl),
            )

        return SessionUser.model_validate(record)

    async def destroy(self, token: str | None) -> None:
        """Delete the session behind ``token`` if there is one."""
        if not token:
            return

        removed = await self._execute_db_operation(
            "destroy_session",
            self.repo.delete_by_token_hash(sha256_hex(token)),
        )
        if removed:
            self._log_operation("Session destroyed")

    async def purge_expired(self) -> int:
        """Delete every expired session. Returns the number removed."""
        removed = await self._execute_db_operation(
            "purge_sessions",
            self.repo.delete_expired(self._clock()),
        )
        if removed:
            self._log_operation("Expired sessions purged", count=removed)
        return removed
