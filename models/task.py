"""
A module defining the `Task` ORM model.

A task belongs to exactly one project and may reference a single goal of
that same project. Recurring tasks go back to ``todo`` on their configured
weekdays once completed; see ``sacredsix.domains.task.recurrence``.
"""

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text

from .base import UUID, BaseModel, enum_column
from .enums import TaskPriority, TaskStatus


class Task(BaseModel):
    __tablename__ = "tasks"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    goal_id = Column(UUID(), ForeignKey("goals.id"), nullable=True, index=True)

    name = Column(String(500), nullable=False)
    description = Column(Text)
    status = enum_column(TaskStatus, TaskStatus.todo)
    priority = enum_column(TaskPriority, TaskPriority.medium)
    estimated_time = Column(Integer, nullable=False, default=0)  # minutes
    due_date = Column(Date)

    is_selected_for_today = Column(Boolean, nullable=False, default=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_days = Column(JSON, nullable=False, default=list)
    last_completed_date = Column(Date)
    completed_at = Column(DateTime(timezone=True))
