"""
Project model, the unit of focus and of sharing.
"""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Index, Integer, String, Text

from .base import UUID, BaseModel


class Project(BaseModel):
    """
    Represents a project owned by a single user.

    At most six non-archived projects per owner may carry ``is_sacred``.
    Tasks, goals, collaborator rows and share invitations belong to the
    project and are removed with it.
    """

    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_owner_sacred", "owner_id", "is_sacred", "is_archived"),
    )

    owner_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    tags = Column(JSON, nullable=False, default=list)
    is_archived = Column(Boolean, nullable=False, default=False)
    is_sacred = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    # Applied to new tasks that do not specify their own recurrence
    default_tasks_recurring = Column(Boolean, nullable=False, default=False)
    default_recurring_days = Column(JSON, nullable=False, default=list)
