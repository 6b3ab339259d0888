"""
User Repository.

Data access for users. Login upserts the Telegram identity in a single
INSERT ... ON CONFLICT statement so concurrent logins with the same
Telegram id can never produce two rows.
"""

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from todo_miniapp.models.user import User
from todo_miniapp.repositories.base import BaseRepository

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def upsert(
        self,
        telegram_id: int,
        first_name: str | None,
        last_name: str | None = None,
        username: str | None = None,
    ) -> User:
        """
        Insert a user or refresh the display fields of an existing one.

        The internal ``id`` of an existing row is preserved.

        Args:
            telegram_id: External Telegram user id
            first_name: Display first name
            last_name: Optional last name
            username: Optional Telegram handle

        Returns:
            The stored user, reflecting the values just written
        """
        try:
            insert = _INSERT_BY_DIALECT[self.dialect_name]
        except KeyError:
            raise NotImplementedError(
                f"Upsert is not supported for dialect {self.dialect_name!r}"
            ) from None

        stmt = insert(User).values(
            telegram_id=telegram_id,
            first_name=first_name,
            last_name=last_name,
            username=username,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.telegram_id],
            set_={
                "first_name": stmt.excluded.first_name,
                "last_name": stmt.excluded.last_name,
                "username": stmt.excluded.username,
            },
        ).returning(User.id)

        result = await self.session.execute(stmt)
        user_id = result.scalar_one()

        # populate_existing refreshes an instance already in the identity map
        user = await self.session.get(User, user_id, populate_existing=True)
        return user

    async def get_by_telegram_id(self, telegram_id: int) -> User | None:
        """Get a user by Telegram id."""
        result = await self.session.execute(
            select(User).where(User.telegram_id == telegram_id)
        )
        return result.scalar_one_or_none()
