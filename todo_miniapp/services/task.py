"""
Task Service.

Business logic layer for tasks. Every method takes the caller's internal
user id explicitly; the id comes from the session resolved at the API
boundary, never from the request body.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from todo_miniapp.core.exceptions import NotFoundError, ValidationError
from todo_miniapp.models.task import DEFAULT_PRIORITY, TITLE_MAX_LENGTH, Task
from todo_miniapp.repositories.task import FILTER_ALL, TaskRepository, TaskStats
from todo_miniapp.schemas.task import TaskCreate, TaskUpdate
from todo_miniapp.services.base import BaseService

TITLE_REQUIRED = "Title is required"
COMPLETED_REQUIRED = "Completed status is required"
TASK_NOT_FOUND = "Task not found"


def _clean_description(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class TaskService(BaseService):
    """
    Service for task business logic.

    A task that does not exist and a task owned by someone else both
    surface as NotFoundError.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TaskRepository(session)

    def _clean_title(self, value: str | None) -> str:
        title = self._validate_required(value, "title", TITLE_REQUIRED)
        self._validate_string_length(title, "title", TITLE_MAX_LENGTH)
        return title

    async def list_tasks(
        self,
        owner_id: int,
        filter: str = FILTER_ALL,
        sort_field: str | None = None,
        direction: str | None = None,
    ) -> list[Task]:
        """
        List the owner's tasks.

        Args:
            owner_id: Internal user id
            filter: ``all``, ``active`` or ``completed``
            sort_field: Logical sort key; unknown keys use creation time
            direction: ``asc`` or ``desc``; anything else means ``desc``

        Returns:
            Ordered list of tasks
        """
        self._log_debug(
            "Listing tasks",
            user_id=owner_id,
            filter=filter,
            sort_field=sort_field,
            direction=direction,
        )
        return await self._execute_db_operation(
            "list_tasks",
            self.repo.list_for_owner(owner_id, filter, sort_field, direction),
        )

    async def get_stats(self, owner_id: int) -> TaskStats:
        """Return total/active/completed counters for the owner."""
        return await self._execute_db_operation(
            "get_stats",
            self.repo.stats_for_owner(owner_id),
        )

    async def create_task(self, owner_id: int, data: TaskCreate) -> Task:
        """
        Create a new task.

        Args:
            owner_id: Internal user id of the owner
            data: Task creation data

        Returns:
            Created task

        Raises:
            ValidationError: If the title is missing, blank or too long
        """
        title = self._clean_title(data.title)
        priority = data.priority if data.priority is not None else DEFAULT_PRIORITY

        self._log_operation("Creating task", user_id=owner_id, priority=priority)

        task = await self._execute_db_operation(
            "create_task",
            self.repo.create_for_owner(
                owner_id,
                title=title,
                description=_clean_description(data.description),
                priority=priority,
                due_date=data.due_date,
            ),
        )

        self._log_debug("Task created", task_id=task.id)
        return task

    async def update_task(self, owner_id: int, task_id: int, data: TaskUpdate) -> Task:
        """
        Update an existing task.

        Fields that are absent or null keep their current value.

        Args:
            owner_id: Internal user id of the caller
            task_id: Task ID to update
            data: Update data

        Returns:
            Updated task

        Raises:
            ValidationError: If a title is given but blank or too long
            NotFoundError: If the caller has no task with that id
        """
        fields = data.model_dump(exclude_none=True)
        if "title" in fields:
            fields["title"] = self._clean_title(fields["title"])
        if "description" in fields:
            fields["description"] = _clean_description(fields["description"])

        self._log_operation(
            "Updating task",
            user_id=owner_id,
            task_id=task_id,
            fields=sorted(fields),
        )

        task = await self._execute_db_operation(
            "update_task",
            self.repo.update_for_owner(task_id, owner_id, fields),
        )
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    async def set_completed(self, owner_id: int, task_id: int, completed: bool | None) -> Task:
        """
        Mark a task completed or active.

        Raises:
            ValidationError: If ``completed`` is not given
            NotFoundError: If the caller has no task with that id
        """
        if completed is None:
            raise ValidationError(COMPLETED_REQUIRED, details={"field": "completed"})

        self._log_operation(
            "Setting task completion",
            user_id=owner_id,
            task_id=task_id,
            completed=completed,
        )

        task = await self._execute_db_operation(
            "set_completed",
            self.repo.set_completed(task_id, owner_id, completed),
        )
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    async def delete_task(self, owner_id: int, task_id: int) -> None:
        """
        Delete a task.

        Raises:
            NotFoundError: If the caller has no task with that id
        """
        self._log_operation("Deleting task", user_id=owner_id, task_id=task_id)

        deleted = await self._execute_db_operation(
            "delete_task",
            self.repo.delete_for_owner(task_id, owner_id),
        )
        if deleted is None:
            raise NotFoundError(TASK_NOT_FOUND)
