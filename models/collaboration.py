"""
Collaboration models: collaborator rows and share invitations.

A project's owner is never stored as a collaborator; ownership is implied by
``Project.owner_id``. Invitation status transitions are owned by
``CollaborationEngine``.
"""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint

from .base import UUID, BaseModel, enum_column, utcnow
from .enums import CollaboratorRole, InvitationStatus


class Collaborator(BaseModel):
    """
    Grants a non-owner user a role on a project.

    :ivar project_id: Project the access applies to.
    :ivar user_id: Collaborating user.
    :ivar role: One of viewer, editor or admin.
    :ivar added_at: When access was granted.
    """

    __tablename__ = "collaborators"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_collaborator_project_user"),)

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    role = enum_column(CollaboratorRole, CollaboratorRole.viewer)
    added_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class ShareInvitation(BaseModel):
    """
    An offer of collaborator access sent to an email address.

    ``recipient_id`` is filled in when a user with ``recipient_email`` is known,
    at latest when the invitation is accepted or rejected.
    """

    __tablename__ = "share_invitations"

    project_id = Column(UUID(), ForeignKey("projects.id"), nullable=False, index=True)
    owner_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)
    recipient_email = Column(String(255), nullable=False, index=True)
    recipient_id = Column(UUID(), ForeignKey("users.id"), nullable=True)
    role = enum_column(CollaboratorRole, CollaboratorRole.viewer)
    message = Column(Text, nullable=False, default="")
    status = enum_column(InvitationStatus, InvitationStatus.pending)
