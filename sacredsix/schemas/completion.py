"""Daily completion schemas."""

import datetime
from uuid import UUID

from .base import BaseModelSchema, BaseSchema


class DailyCompletionUpdate(BaseSchema):
    """Record the caller's today-selection; ``date`` defaults to today (UTC)."""

    date: datetime.date | None = None


class DailyCompletionResponse(BaseModelSchema):
    user_id: UUID
    date: datetime.date
    tasks_selected: int
    tasks_completed: int
    fully_completed: bool


class DaySnapshotResponse(BaseSchema):
    date: datetime.date
    tasks_completed: int
    tasks_selected: int
    completion_percentage: int


class CompletionStatsResponse(BaseSchema):
    total_days: int
    fully_completed_days: int
    completion_rate: int
    average_tasks_completed: float
    current_streak: int
    longest_streak: int
    series: list[DaySnapshotResponse] = []
