"""Goal schemas for request/response serialization."""

from datetime import date
from uuid import UUID

from pydantic import Field

from models.enums import GoalStatus

from .base import BaseModelSchema, BaseSchema


class GoalCreate(BaseSchema):
    project_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    target_date: date | None = None


class GoalUpdate(BaseSchema):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    target_date: date | None = None


class GoalLinkRequest(BaseSchema):
    """Link one task to a goal, or unlink it with ``goal_id: null``."""

    goal_id: UUID | None = None


class GoalRelinkRequest(BaseSchema):
    """The full set of tasks that should be linked to the goal."""

    task_ids: list[UUID] = Field(default_factory=list)


class SkippedTask(BaseSchema):
    task_id: UUID
    reason: str


class RelinkResponse(BaseSchema):
    linked: list[UUID] = []
    unlinked: list[UUID] = []
    unchanged: list[UUID] = []
    skipped: list[SkippedTask] = []


class GoalResponse(BaseModelSchema):
    project_id: UUID
    name: str
    description: str | None = None
    status: GoalStatus
    target_date: date | None = None
    progress: int
