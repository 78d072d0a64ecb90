"""Closed enumerations for statuses, priorities, roles and weekdays."""

from enum import Enum


class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    done = "done"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class GoalStatus(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


class CollaboratorRole(str, Enum):
    """Roles that can be stored on a collaborator row."""

    viewer = "viewer"
    editor = "editor"
    admin = "admin"


class ProjectRole(str, Enum):
    """Effective role of a user on a project, including the implicit owner."""

    none = "none"
    viewer = "viewer"
    editor = "editor"
    admin = "admin"
    owner = "owner"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: "ProjectRole") -> bool:
        return self.rank >= other.rank

    @classmethod
    def from_collaborator(cls, role: CollaboratorRole) -> "ProjectRole":
        return cls(role.value)


_ROLE_RANK = {
    ProjectRole.none: 0,
    ProjectRole.viewer: 1,
    ProjectRole.editor: 2,
    ProjectRole.admin: 3,
    ProjectRole.owner: 4,
}


class InvitationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    revoked = "revoked"


class Weekday(str, Enum):
    """Weekday names in ``date.weekday()`` order."""

    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @classmethod
    def of(cls, day) -> "Weekday":
        return WEEKDAYS[day.weekday()]


WEEKDAYS = list(Weekday)
WORKDAYS = frozenset(WEEKDAYS[:5])
