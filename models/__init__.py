"""
Models package initialization.
"""

from .base import Base, BaseModel
from .collaboration import Collaborator, ShareInvitation
from .daily_completion import DailyCompletionRecord
from .enums import (
    CollaboratorRole,
    GoalStatus,
    InvitationStatus,
    ProjectRole,
    TaskPriority,
    TaskStatus,
    Weekday,
)
from .goal import Goal
from .project import Project
from .task import Task
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Project",
    "Task",
    "Goal",
    "Collaborator",
    "ShareInvitation",
    "DailyCompletionRecord",
    # Enumerations
    "CollaboratorRole",
    "GoalStatus",
    "InvitationStatus",
    "ProjectRole",
    "TaskPriority",
    "TaskStatus",
    "Weekday",
]
