"""
Session Repository.

Data access for login sessions, addressed by token hash.
"""

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from todo_miniapp.models.session import UserSession
from todo_miniapp.repositories.base import BaseRepository


class SessionRepository(BaseRepository[UserSession]):
    """Repository for UserSession model."""

    model = UserSession

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_token_hash(self, token_hash: str) -> UserSession | None:
        """Get a session by the hash of its token."""
        result = await self.session.execute(
            select(UserSession)
            .where(UserSession.token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def extend(self, token_hash: str, expires_at: datetime) -> None:
        """Move a session's expiry."""
        await self.session.execute(
            update(UserSession)
            .where(UserSession.token_hash == token_hash)
            .values(expires_at=expires_at)
        )

    async def delete_by_token_hash(self, token_hash: str) -> bool:
        """Delete a session. Returns True if a row was removed."""
        result = await self.session.execute(
            delete(UserSession).where(UserSession.token_hash == token_hash)
        )
        return result.rowcount > 0

    async def delete_expired(self, now: datetime) -> int:
        """Delete every session that expired before ``now``. Returns the count."""
        result = await self.session.execute(
            delete(UserSession).where(UserSession.expires_at <= now)
        )
        return result.rowcount
