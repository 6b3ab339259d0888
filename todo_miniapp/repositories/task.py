"""
Task Repository.

Data access layer for tasks. Every statement is scoped by owner: queries
that address one task filter on ``(id, user_id)`` together, so a task that
belongs to someone else looks exactly like one that does not exist.

Each mutation is one UPDATE/DELETE ... RETURNING statement.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from todo_miniapp.core.utils import utc_now
from todo_miniapp.models.task import DEFAULT_PRIORITY, Task
from todo_miniapp.repositories.base import BaseRepository

FILTER_ALL = "all"
FILTER_ACTIVE = "active"
FILTER_COMPLETED = "completed"

DEFAULT_SORT_COLUMN: InstrumentedAttribute = Task.created_at
DEFAULT_DIRECTION = "desc"

# Logical sort key -> column. Anything else falls back to DEFAULT_SORT_COLUMN.
SORT_COLUMNS: dict[str, InstrumentedAttribute] = {
    "created": Task.created_at,
    "created_at": Task.created_at,
    "updated": Task.updated_at,
    "updated_at": Task.updated_at,
    "priority": Task.priority,
    "dueDate": Task.due_date,
    "due_date": Task.due_date,
    "title": Task.title,
}

UPDATABLE_FIELDS = frozenset({"title", "description", "completed", "priority", "due_date"})


@dataclass(frozen=True)
class TaskStats:
    """Task counters for one owner."""

    total: int
    active: int
    completed: int


def resolve_ordering(sort_field: str | None, direction: str | None) -> tuple[InstrumentedAttribute, str]:
    """Map user-supplied sort options onto an allow-listed column and direction."""
    column = SORT_COLUMNS.get(sort_field or "", DEFAULT_SORT_COLUMN)
    normalized = (direction or "").lower()
    if normalized not in ("asc", "desc"):
        normalized = DEFAULT_DIRECTION
    return column, normalized


class TaskRepository(BaseRepository[Task]):
    """Repository for Task model."""

    model = Task

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_for_owner(
        self,
        owner_id: int,
        filter: str = FILTER_ALL,
        sort_field: str | None = None,
        direction: str | None = None,
    ) -> list[Task]:
        """
        List an owner's tasks.

        Args:
            owner_id: Internal user id
            filter: ``all``, ``active`` or ``completed`` (unknown values mean ``all``)
            sort_field: Logical sort key, see SORT_COLUMNS
            direction: ``asc`` or ``desc``, case-insensitive

        Returns:
            Ordered list of tasks
        """
        stmt = select(Task).where(Task.user_id == owner_id)

        if filter == FILTER_ACTIVE:
            stmt = stmt.where(Task.completed == False)  # noqa: E712
        elif filter == FILTER_COMPLETED:
            stmt = stmt.where(Task.completed == True)  # noqa: E712

        column, normalized = resolve_ordering(sort_field, direction)
        if normalized == "asc":
            stmt = stmt.order_by(column.asc(), Task.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), Task.id.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_for_owner(
        self,
        owner_id: int,
        title: str,
        description: str | None = None,
        priority: int = DEFAULT_PRIORITY,
        due_date: date | None = None,
    ) -> Task:
        """Create a task owned by ``owner_id``."""
        return await self.create(
            user_id=owner_id,
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
        )

    async def update_for_owner(
        self,
        task_id: int,
        owner_id: int,
        fields: dict[str, Any],
    ) -> Task | None:
        """
        Apply a partial update to one of the owner's tasks.

        Only keys present in ``fields`` are written; the rest keep their
        current value. ``updated_at`` is always refreshed.

        Returns:
            The updated task, or None if no task with that id belongs to the owner
        """
        values = {key: value for key, value in fields.items() if key in UPDATABLE_FIELDS}
        values["updated_at"] = utc_now()
        return await self._update_returning(task_id, owner_id, values)

    async def set_completed(self, task_id: int, owner_id: int, completed: bool) -> Task | None:
        """Set the completion flag of one of the owner's tasks."""
        return await self._update_returning(
            task_id,
            owner_id,
            {"completed": completed, "updated_at": utc_now()},
        )

    async def delete_for_owner(self, task_id: int, owner_id: int) -> Task | None:
        """
        Delete one of the owner's tasks.

        Returns:
            The deleted task, or None if no task with that id belongs to the owner
        """
        stmt = (
            delete(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .returning(Task)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def stats_for_owner(self, owner_id: int) -> TaskStats:
        """Count total, active and completed tasks for one owner."""
        stmt = select(
            func.count(Task.id),
            func.coalesce(func.sum(case((Task.completed == False, 1), else_=0)), 0),  # noqa: E712
            func.coalesce(func.sum(case((Task.completed == True, 1), else_=0)), 0),  # noqa: E712
        ).where(Task.user_id == owner_id)

        result = await self.session.execute(stmt)
        total, active, completed = result.one()
        return TaskStats(total=int(total), active=int(active), completed=int(completed))

    async def _update_returning(
        self,
        task_id: int,
        owner_id: int,
        values: dict[str, Any],
    ) -> Task | None:
        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .values(**values)
            .returning(Task)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
