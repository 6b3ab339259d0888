"""
Tasks API Endpoints.

REST API endpoints for the caller's to-do list. Every endpoint requires a
session; the owner id always comes from the session, never from the body.
"""

from fastapi import APIRouter, Query

from todo_miniapp.core.dependencies import CurrentUser, DbSession
from todo_miniapp.schemas.base import ApiResponse
from todo_miniapp.schemas.task import (
    TaskCreate,
    TaskListResponse,
    TaskRead,
    TaskResponse,
    TaskStatsRead,
    TaskToggle,
    TaskUpdate,
)
from todo_miniapp.services.task import TaskService

router = APIRouter()


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List tasks",
    description="List the caller's tasks with filter and ordering, plus counters.",
)
async def list_tasks(
    db: DbSession,
    user: CurrentUser,
    task_filter: str = Query(
        default="all",
        alias="filter",
        description="all, active or completed",
    ),
    order: str = Query(
        default="created_at",
        description="created_at, updated_at, priority, due_date or title",
    ),
    direction: str = Query(default="DESC", description="ASC or DESC"),
) -> TaskListResponse:
    """List tasks."""
    service = TaskService(db)
    tasks = await service.list_tasks(user.user_id, task_filter, order, direction)
    stats = await service.get_stats(user.user_id)
    return TaskListResponse(
        tasks=[TaskRead.model_validate(task) for task in tasks],
        stats=TaskStatsRead.model_validate(stats),
    )


@router.post(
    "",
    response_model=TaskResponse,
    status_code=201,
    summary="Create a task",
    description="Create a task with a title and optional description, priority and due date.",
)
async def create_task(
    data: TaskCreate,
    db: DbSession,
    user: CurrentUser,
) -> TaskResponse:
    """Create a task."""
    service = TaskService(db)
    task = await service.create_task(user.user_id, data)
    return TaskResponse(task=TaskRead.model_validate(task))


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
    description="Partial update. Absent or null fields keep their current value.",
)
async def update_task(
    task_id: int,
    data: TaskUpdate,
    db: DbSession,
    user: CurrentUser,
) -> TaskResponse:
    """Update a task."""
    service = TaskService(db)
    task = await service.update_task(user.user_id, task_id, data)
    return TaskResponse(task=TaskRead.model_validate(task))


@router.delete(
    "/{task_id}",
    response_model=ApiResponse,
    summary="Delete a task",
    description="Permanently delete a task.",
)
async def delete_task(
    task_id: int,
    db: DbSession,
    user: CurrentUser,
) -> ApiResponse:
    """Delete a task."""
    service = TaskService(db)
    await service.delete_task(user.user_id, task_id)
    return ApiResponse()


@router.patch(
    "/{task_id}/toggle",
    response_model=TaskResponse,
    summary="Set task completion",
    description="Mark a task completed or active.",
)
async def toggle_task(
    task_id: int,
    data: TaskToggle,
    db: DbSession,
    user: CurrentUser,
) -> TaskResponse:
    """Set the completion flag."""
    service = TaskService(db)
    task = await service.set_completed(user.user_id, task_id, data.completed)
    return TaskResponse(task=TaskRead.model_validate(task))
