"""Task schemas for request/response serialization."""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field, field_validator

from models.enums import TaskPriority, TaskStatus, Weekday

from .base import BaseModelSchema, BaseSchema

MAX_TODAY_TASKS = 6


class TaskBase(BaseSchema):
    """Base task schema with common fields."""

    name: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    priority: TaskPriority = TaskPriority.medium
    estimated_time: int = Field(default=0, ge=0)
    due_date: date | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task name cannot be empty or only whitespace")
        return v


class TaskCreate(TaskBase):
    """Schema for creating a task.

    ``is_recurring`` and ``recurring_days`` fall back to the project's
    recurring defaults when omitted.
    """

    project_id: UUID
    goal_id: UUID | None = None
    is_recurring: bool | None = None
    recurring_days: list[Weekday] | None = None


class TaskUpdate(BaseSchema):
    """Schema for updating a task."""

    name: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    estimated_time: int | None = Field(None, ge=0)
    due_date: date | None = None
    is_recurring: bool | None = None
    recurring_days: list[Weekday] | None = None


class TodaySelection(BaseSchema):
    """Replaces the caller's today-selection."""

    task_ids: list[UUID] = Field(..., max_length=MAX_TODAY_TASKS)


class TaskResponse(BaseModelSchema):
    """Schema for task response."""

    project_id: UUID
    user_id: UUID
    goal_id: UUID | None = None
    name: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    estimated_time: int
    due_date: date | None = None
    is_selected_for_today: bool
    is_recurring: bool
    recurring_days: list[Weekday] = []
    last_completed_date: date | None = None
    completed_at: datetime | None = None
