"""Project schemas for request/response serialization."""

from uuid import UUID

from pydantic import Field, field_validator

from models.enums import Weekday

from .base import BaseModelSchema, BaseSchema


def _clean_name(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty or only whitespace")
    return v


class ProjectBase(BaseSchema):
    """Base project schema with common fields."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the project name."""
        return _clean_name(v)


class ProjectCreate(ProjectBase):
    """Schema for creating a new project."""

    is_sacred: bool = False
    default_tasks_recurring: bool = False
    default_recurring_days: list[Weekday] = Field(default_factory=list)


class ProjectUpdate(BaseSchema):
    """Schema for updating a project's descriptive fields."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    tags: list[str] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate and clean the project name."""
        return _clean_name(v)


class SacredToggle(BaseSchema):
    is_sacred: bool


class ArchiveToggle(BaseSchema):
    is_archived: bool


class RecurringSettings(BaseSchema):
    """Recurring defaults applied to new tasks of the project."""

    default_tasks_recurring: bool
    default_recurring_days: list[Weekday] = Field(default_factory=list)


class ProjectReorder(BaseSchema):
    project_ids: list[UUID] = Field(..., min_length=1)


class ProjectResponse(BaseModelSchema):
    """Schema for project response."""

    owner_id: UUID
    name: str
    description: str | None = None
    tags: list[str] = []
    is_archived: bool
    is_sacred: bool
    sort_order: int
    default_tasks_recurring: bool
    default_recurring_days: list[Weekday] = []

    # Filled in per caller
    role: str | None = None
