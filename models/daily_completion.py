"""Per-user, per-date snapshot of how many selected tasks were completed."""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, UniqueConstraint

from .base import UUID, BaseModel


class DailyCompletionRecord(BaseModel):
    __tablename__ = "daily_completion_records"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_completion_user_date"),)

    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    tasks_selected = Column(Integer, nullable=False, default=0)
    tasks_completed = Column(Integer, nullable=False, default=0)
    fully_completed = Column(Boolean, nullable=False, default=False)
