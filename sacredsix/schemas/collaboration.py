"""Sharing schemas: invitations and collaborators."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from models.enums import CollaboratorRole, InvitationStatus

from .base import BaseModelSchema, BaseSchema


class InvitationCreate(BaseSchema):
    project_id: UUID
    recipient_email: str = Field(..., min_length=3, max_length=255)
    role: CollaboratorRole = CollaboratorRole.viewer
    message: str | None = Field(None, max_length=1000)


class RoleChange(BaseSchema):
    role: CollaboratorRole


class InvitationResponse(BaseModelSchema):
    project_id: UUID
    owner_id: UUID
    recipient_email: str
    recipient_id: UUID | None = None
    role: CollaboratorRole
    message: str = ""
    status: InvitationStatus


class CollaboratorResponse(BaseSchema):
    project_id: UUID
    user_id: UUID
    role: CollaboratorRole
    added_at: datetime
