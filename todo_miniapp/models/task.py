"""
Task Model.

A to-do item owned by exactly one user.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from todo_miniapp.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from todo_miniapp.models.user import User

TITLE_MAX_LENGTH = 255
DEFAULT_PRIORITY = 2


class Task(TimestampMixin, Base):
    """
    Task database model.

    Priority is 1 (low), 2 (medium) or 3 (high). Rows are deleted
    together with their owner.
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed: Mapped[bool] = mapped_column(default=False, nullable=False, index=True)
    priority: Mapped[int] = mapped_column(default=DEFAULT_PRIORITY, nullable=False, index=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)

    user: Mapped["User"] = relationship(back_populates="tasks")

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, user_id={self.user_id}, title={self.title!r})>"
