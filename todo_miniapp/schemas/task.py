"""
Task Schemas.

Pydantic schemas for task API request/response validation.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from todo_miniapp.schemas.base import ApiResponse

PRIORITY_LOW = 1
PRIORITY_MEDIUM = 2
PRIORITY_HIGH = 3


class TaskCreate(BaseModel):
    """
    Schema for creating a new task.

    ``title`` is optional here so that a missing or blank title reaches
    the service and is reported as a 400 ``Title is required``.
    """

    title: str | None = Field(
        default=None,
        description="Task title",
        examples=["Buy milk"],
    )
    description: str | None = Field(
        default=None,
        max_length=10000,
        description="Free-text description",
    )
    priority: int | None = Field(
        default=None,
        ge=PRIORITY_LOW,
        le=PRIORITY_HIGH,
        description="1 = low, 2 = medium, 3 = high",
    )
    due_date: date | None = Field(default=None, description="Due date (YYYY-MM-DD)")


class TaskUpdate(BaseModel):
    """Schema for a partial task update. Null or absent fields keep their value."""

    title: str | None = Field(default=None, description="Task title")
    description: str | None = Field(default=None, max_length=10000)
    completed: StrictBool | None = None
    priority: int | None = Field(default=None, ge=PRIORITY_LOW, le=PRIORITY_HIGH)
    due_date: date | None = None


class TaskToggle(BaseModel):
    """Schema for PATCH /tasks/{id}/toggle."""

    completed: StrictBool | None = None


class TaskRead(BaseModel):
    """Schema for a task in API responses."""

    id: int
    user_id: int
    title: str
    description: str | None
    completed: bool
    priority: int
    due_date: date | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskStatsRead(BaseModel):
    """Per-owner task counters."""

    total: int
    active: int
    completed: int

    model_config = ConfigDict(from_attributes=True)


class TaskResponse(ApiResponse):
    task: TaskRead


class TaskListResponse(ApiResponse):
    tasks: list[TaskRead]
    stats: TaskStatsRead
