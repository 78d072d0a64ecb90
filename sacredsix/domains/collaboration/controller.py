"""Project sharing API controller."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path

from models.user import User
from sacredsix.core.dependencies import get_collaboration_engine, get_current_user, validate_token
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.schemas.base import ResponseSchema
from sacredsix.schemas.collaboration import (
    CollaboratorResponse,
    InvitationCreate,
    InvitationResponse,
    RoleChange,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/sharing",
    tags=["sharing"],
    dependencies=[Depends(validate_token)],
)


def _invitation_data(invitation) -> dict:
    return InvitationResponse.model_validate(invitation).model_dump(mode="json")


def _invitation_list(invitations) -> dict:
    return {
        "invitations": [_invitation_data(invitation) for invitation in invitations],
        "total": len(invitations),
    }


@router.post("/invitations", response_model=ResponseSchema, status_code=201)
async def create_invitation(
    invitation_data: InvitationCreate,
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Share a project by email."""
    invitation = await engine.create_invitation(
        inviter_id=current_user.id,
        project_id=invitation_data.project_id,
        recipient_email=invitation_data.recipient_email,
        role=invitation_data.role,
        message=invitation_data.message,
    )

    return ResponseSchema(
        status="success",
        message="Project shared successfully",
        data=_invitation_data(invitation),
    )


@router.get("/invitations/received", response_model=ResponseSchema)
async def get_received_invitations(
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    invitations = await engine.list_received(current_user.id)
    return ResponseSchema(
        status="success",
        message="Received invitations retrieved successfully",
        data=_invitation_list(invitations),
    )


@router.get("/invitations/sent", response_model=ResponseSchema)
async def get_sent_invitations(
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    invitations = await engine.list_sent(current_user.id)
    return ResponseSchema(
        status="success",
        message="Sent invitations retrieved successfully",
        data=_invitation_list(invitations),
    )


@router.put("/invitations/{invitation_id}/accept", response_model=ResponseSchema)
async def accept_invitation(
    invitation_id: UUID = Path(..., description="Invitation ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    invitation = await engine.accept(invitation_id, current_user.id)
    return ResponseSchema(
        status="success",
        message="Invitation accepted",
        data=_invitation_data(invitation),
    )


@router.put("/invitations/{invitation_id}/reject", response_model=ResponseSchema)
async def reject_invitation(
    invitation_id: UUID = Path(..., description="Invitation ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    invitation = await engine.reject(invitation_id, current_user.id)
    return ResponseSchema(
        status="success",
        message="Invitation rejected",
        data=_invitation_data(invitation),
    )


@router.put("/invitations/{invitation_id}/revoke", response_model=ResponseSchema)
async def revoke_invitation(
    invitation_id: UUID = Path(..., description="Invitation ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    """Withdraw a pending invitation or end an accepted one."""
    invitation = await engine.revoke(invitation_id, current_user.id)
    return ResponseSchema(
        status="success",
        message="Invitation revoked",
        data=_invitation_data(invitation),
    )


@router.get("/projects/{project_id}/collaborators", response_model=ResponseSchema)
async def get_collaborators(
    project_id: UUID = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    collaborators = await engine.list_collaborators(project_id, current_user.id)
    return ResponseSchema(
        status="success",
        message="Collaborators retrieved successfully",
        data={
            "collaborators": [
                CollaboratorResponse.model_validate(row).model_dump(mode="json")
                for row in collaborators
            ],
            "total": len(collaborators),
        },
    )


@router.put("/projects/{project_id}/collaborators/{user_id}", response_model=ResponseSchema)
async def change_collaborator_role(
    role_change: RoleChange,
    project_id: UUID = Path(..., description="Project ID"),
    user_id: UUID = Path(..., description="Collaborator user ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    collaborator = await engine.change_collaborator_role(
        project_id, user_id, role_change.role, current_user.id
    )
    return ResponseSchema(
        status="success",
        message="Collaborator role updated",
        data=CollaboratorResponse.model_validate(collaborator).model_dump(mode="json"),
    )


@router.delete("/projects/{project_id}/collaborators/{user_id}", response_model=ResponseSchema)
async def remove_collaborator(
    project_id: UUID = Path(..., description="Project ID"),
    user_id: UUID = Path(..., description="Collaborator user ID"),
    current_user: User = Depends(get_current_user),
    engine: CollaborationEngine = Depends(get_collaboration_engine),
):
    await engine.remove_collaborator(project_id, user_id, current_user.id)
    return ResponseSchema(status="success", message="Collaborator removed", data=None)
