"""Goal model. Goals are owned by a project; tasks point at them."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text

from .base import UUID, BaseModel, enum_column
from .enums import GoalStatus


class Goal(BaseModel):
    __tablename__ = "goals"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    status = enum_column(GoalStatus, GoalStatus.not_started)
    target_date = Column(Date)
    progress = Column(Integer, nullable=False, default=0)  # 0-100, derived
