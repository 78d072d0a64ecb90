"""Collaboration engine: project roles, permission checks and share invitations."""

import logging
import re
from uuid import UUID

from sqlalchemy import or_

from models import Collaborator, Project, ShareInvitation, User
from models.base import utcnow
from models.enums import CollaboratorRole, InvitationStatus, ProjectRole
from sacredsix.domains.collaboration.permissions import REQUIRED_ROLE, ProjectAction, is_allowed
from sacredsix.exceptions import (
    AuthorizationError,
    InvitationNotFoundError,
    NotFoundError,
    ProjectNotFoundError,
    StateError,
    ValidationError,
)
from sacredsix.services.notification_service import InvitationNotifier, get_invitation_notifier
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CollaborationEngine:
    """Owns who may do what on a project and the invitation lifecycle.

    Invitation states are ``pending``, ``accepted``, ``rejected`` and
    ``revoked``; only ``pending`` (and ``accepted`` for revoke) may move.
    Every transition is a compare-and-set on the stored status so concurrent
    accept/reject/revoke calls cannot both apply their side effects.
    """

    def __init__(self, store: EntityStore, notifier: InvitationNotifier | None = None):
        self.store = store
        self.notifier = notifier if notifier is not None else get_invitation_notifier()

    # ------------------------------------------------------------------
    # Roles and permissions
    # ------------------------------------------------------------------

    async def role_of(self, project_id: UUID, user_id: UUID) -> ProjectRole:
        """Return the effective role of ``user_id`` on the project."""
        project = await self._get_project(project_id)
        return await self._role_in(project, user_id)

    async def authorize(
        self, project_id: UUID, user_id: UUID, action: ProjectAction
    ) -> tuple[Project, ProjectRole]:
        """Check that the user may perform ``action`` on the project.

        Returns the project and the caller's role so callers need not load
        the project again.

        Raises:
            ProjectNotFoundError: If the project does not exist.
            AuthorizationError: If the caller's role is below the required tier.
        """
        project = await self._get_project(project_id)
        role = await self._role_in(project, user_id)
        if not is_allowed(role, action):
            logger.info(f"Denied {action.value} on project {project_id} for user {user_id} with role {role.value}")
            raise AuthorizationError(
                f"Role '{role.value}' may not {action.value.replace('_', ' ')} on this project",
                details={
                    "action": action.value,
                    "role": role.value,
                    "required_role": REQUIRED_ROLE[action].value,
                },
            )
        return project, role

    async def list_collaborators(self, project_id: UUID, actor_id: UUID) -> list[Collaborator]:
        await self.authorize(project_id, actor_id, ProjectAction.view)
        return await self.store.list(
            Collaborator, project_id=project_id, order_by=Collaborator.added_at
        )

    # ------------------------------------------------------------------
    # Invitations
    # ------------------------------------------------------------------

    async def create_invitation(
        self,
        inviter_id: UUID,
        project_id: UUID,
        recipient_email: str,
        role: CollaboratorRole | str = CollaboratorRole.viewer,
        message: str | None = None,
    ) -> ShareInvitation:
        """Create a pending invitation and dispatch the invitation email.

        Duplicate pending invitations to the same address are allowed; the
        newest one wins on acceptance. Email delivery happens after commit and
        its failure never undoes the invitation.
        """
        email = self._normalize_email(recipient_email)
        role = self._coerce_role(role)

        async with self.store.transaction():
            project, _ = await self.authorize(project_id, inviter_id, ProjectAction.manage_collaborators)
            owner = await self.store.get(User, project.owner_id)
            if owner is not None and owner.email.lower() == email:
                raise ValidationError("The project owner cannot be invited to their own project")

            recipient = await self.store.first(User, User.email == email)
            invitation = ShareInvitation(
                project_id=project.id,
                owner_id=inviter_id,
                recipient_email=email,
                recipient_id=recipient.id if recipient else None,
                role=role,
                message=message or "",
                status=InvitationStatus.pending,
            )
            await self.store.put(invitation)
            inviter = await self.store.get(User, inviter_id)

        await self.store.refresh(invitation)
        logger.info(f"Created invitation {invitation.id} for project {project.id} to {email} as {role.value}")

        try:
            self.notifier.send_invitation_email(
                recipient_email=email,
                project_name=project.name,
                inviter_name=inviter.display_name if inviter else "A Sacred Six user",
                message=invitation.message,
            )
        except Exception:
            logger.exception(f"Failed to dispatch invitation email for invitation {invitation.id}")

        return invitation

    async def accept(self, invitation_id: UUID, recipient_user_id: UUID) -> ShareInvitation:
        """Accept a pending invitation and grant collaborator access.

        Accepting an already accepted invitation is a successful no-op.
        """
        async with self.store.transaction():
            invitation = await self._get_invitation(invitation_id)
            user = await self._get_user(recipient_user_id)
            self._ensure_recipient(invitation, user)

            if invitation.status is InvitationStatus.accepted:
                logger.info(f"Invitation {invitation.id} already accepted")
                return invitation
            if invitation.status is not InvitationStatus.pending:
                raise StateError(
                    f"Cannot accept an invitation that is {invitation.status.value}",
                    current_status=invitation.status.value,
                )

            # Newest pending invitation for this project and address decides the role
            pending = await self.store.list(
                ShareInvitation,
                ShareInvitation.project_id == invitation.project_id,
                ShareInvitation.status == InvitationStatus.pending,
                or_(
                    ShareInvitation.recipient_email == invitation.recipient_email,
                    ShareInvitation.recipient_id == user.id,
                ),
                order_by=ShareInvitation.created_at.desc(),
            )
            authoritative = pending[0] if pending else invitation

            values = {"status": InvitationStatus.accepted, "recipient_id": user.id}
            if not await self._transition(invitation, InvitationStatus.pending, values):
                await self.store.refresh(invitation)
                if invitation.status is InvitationStatus.accepted:
                    return invitation
                raise StateError(
                    f"Cannot accept an invitation that is {invitation.status.value}",
                    current_status=invitation.status.value,
                )

            duplicate_ids = [other.id for other in pending if other.id != invitation.id]
            if duplicate_ids:
                await self.store.update_where(
                    ShareInvitation,
                    values,
                    ShareInvitation.id.in_(duplicate_ids),
                    ShareInvitation.status == InvitationStatus.pending,
                )

            await self._grant(invitation.project_id, user.id, authoritative.role)

        await self.store.refresh(invitation)
        logger.info(f"User {user.id} accepted invitation {invitation.id}")
        return invitation

    async def reject(self, invitation_id: UUID, recipient_user_id: UUID) -> ShareInvitation:
        async with self.store.transaction():
            invitation = await self._get_invitation(invitation_id)
            user = await self._get_user(recipient_user_id)
            self._ensure_recipient(invitation, user)

            values = {"status": InvitationStatus.rejected, "recipient_id": user.id}
            if invitation.status is not InvitationStatus.pending or not await self._transition(
                invitation, InvitationStatus.pending, values
            ):
                await self.store.refresh(invitation)
                raise StateError(
                    f"Cannot reject an invitation that is {invitation.status.value}",
                    current_status=invitation.status.value,
                )

        await self.store.refresh(invitation)
        logger.info(f"User {user.id} rejected invitation {invitation.id}")
        return invitation

    async def revoke(self, invitation_id: UUID, actor_id: UUID) -> ShareInvitation:
        """Revoke a pending or accepted invitation.

        Revoking an accepted invitation also removes the collaborator row it
        created and revokes the duplicates that were accepted with it.
        """
        async with self.store.transaction():
            invitation = await self._get_invitation(invitation_id)
            await self.authorize(invitation.project_id, actor_id, ProjectAction.manage_collaborators)

            previous = invitation.status
            if previous not in (InvitationStatus.pending, InvitationStatus.accepted):
                raise StateError(
                    f"Cannot revoke an invitation that is {previous.value}",
                    current_status=previous.value,
                )
            if not await self._transition(invitation, previous, {"status": InvitationStatus.revoked}):
                await self.store.refresh(invitation)
                raise StateError(
                    "Invitation changed while it was being revoked",
                    current_status=invitation.status.value,
                )

            siblings = 0
            if previous is InvitationStatus.accepted and invitation.recipient_id is not None:
                await self.store.delete_where(
                    Collaborator,
                    project_id=invitation.project_id,
                    user_id=invitation.recipient_id,
                )
                # Duplicates accepted together lose their access together
                siblings = await self.store.update_where(
                    ShareInvitation,
                    {"status": InvitationStatus.revoked},
                    ShareInvitation.project_id == invitation.project_id,
                    ShareInvitation.status == InvitationStatus.accepted,
                    or_(
                        ShareInvitation.recipient_id == invitation.recipient_id,
                        ShareInvitation.recipient_email == invitation.recipient_email,
                    ),
                )

        await self.store.refresh(invitation)
        logger.info(
            f"User {actor_id} revoked invitation {invitation.id} (was {previous.value}, "
            f"{siblings} duplicates revoked)"
        )
        return invitation

    async def list_received(self, user_id: UUID) -> list[ShareInvitation]:
        user = await self._get_user(user_id)
        return await self.store.list(
            ShareInvitation,
            or_(
                ShareInvitation.recipient_id == user.id,
                ShareInvitation.recipient_email == user.email.lower(),
            ),
            order_by=ShareInvitation.created_at.desc(),
        )

    async def list_sent(self, user_id: UUID) -> list[ShareInvitation]:
        return await self.store.list(
            ShareInvitation, owner_id=user_id, order_by=ShareInvitation.created_at.desc()
        )

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    async def remove_collaborator(self, project_id: UUID, user_id: UUID, actor_id: UUID) -> None:
        """Remove a collaborator; same effect as revoking their accepted invitation."""
        async with self.store.transaction():
            project, _ = await self.authorize(project_id, actor_id, ProjectAction.manage_collaborators)
            if project.owner_id == user_id:
                raise ValidationError("Cannot remove the project owner")

            collaborator = await self.store.first(Collaborator, project_id=project_id, user_id=user_id)
            if collaborator is None:
                raise NotFoundError("Collaborator not found on this project")
            await self.store.delete(collaborator)

            user = await self.store.get(User, user_id)
            recipient_match = [ShareInvitation.recipient_id == user_id]
            if user is not None:
                recipient_match.append(ShareInvitation.recipient_email == user.email.lower())
            revoked = await self.store.update_where(
                ShareInvitation,
                {"status": InvitationStatus.revoked},
                ShareInvitation.project_id == project_id,
                ShareInvitation.status.in_([InvitationStatus.pending, InvitationStatus.accepted]),
                or_(*recipient_match),
            )

        logger.info(
            f"User {actor_id} removed collaborator {user_id} from project {project_id} "
            f"({revoked} invitations revoked)"
        )

    async def change_collaborator_role(
        self, project_id: UUID, user_id: UUID, role: CollaboratorRole | str, actor_id: UUID
    ) -> Collaborator:
        role = self._coerce_role(role)
        async with self.store.transaction():
            project, _ = await self.authorize(
                project_id, actor_id, ProjectAction.change_collaborator_role
            )
            if project.owner_id == user_id:
                raise ValidationError("The project owner's role cannot be changed")

            collaborator = await self.store.first(Collaborator, project_id=project_id, user_id=user_id)
            if collaborator is None:
                raise NotFoundError("Collaborator not found on this project")
            collaborator.role = role
            await self.store.put(collaborator)

        await self.store.refresh(collaborator)
        return collaborator

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get_project(self, project_id: UUID) -> Project:
        project = await self.store.get(Project, project_id)
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def _get_invitation(self, invitation_id: UUID) -> ShareInvitation:
        invitation = await self.store.get(ShareInvitation, invitation_id)
        if invitation is None:
            raise InvitationNotFoundError()
        return invitation

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.store.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def _role_in(self, project: Project, user_id: UUID) -> ProjectRole:
        if project.owner_id == user_id:
            return ProjectRole.owner
        collaborator = await self.store.first(Collaborator, project_id=project.id, user_id=user_id)
        if collaborator is None:
            return ProjectRole.none
        return ProjectRole.from_collaborator(collaborator.role)

    async def _transition(
        self, invitation: ShareInvitation, expected: InvitationStatus, values: dict
    ) -> bool:
        changed = await self.store.update_where(
            ShareInvitation,
            {**values, "updated_at": utcnow()},
            ShareInvitation.id == invitation.id,
            ShareInvitation.status == expected,
        )
        return changed == 1

    async def _grant(self, project_id: UUID, user_id: UUID, role: CollaboratorRole) -> Collaborator:
        collaborator = await self.store.first(Collaborator, project_id=project_id, user_id=user_id)
        if collaborator is None:
            collaborator = Collaborator(project_id=project_id, user_id=user_id, role=role)
        else:
            collaborator.role = role
        return await self.store.put(collaborator)

    @staticmethod
    def _ensure_recipient(invitation: ShareInvitation, user: User) -> None:
        if invitation.recipient_id == user.id:
            return
        if invitation.recipient_email == user.email.lower():
            return
        raise AuthorizationError("This invitation was sent to someone else")

    @staticmethod
    def _normalize_email(email: str | None) -> str:
        email = (email or "").strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("A valid recipient email is required", details={"email": email})
        return email

    @staticmethod
    def _coerce_role(role: CollaboratorRole | str) -> CollaboratorRole:
        try:
            return CollaboratorRole(role)
        except ValueError as e:
            raise ValidationError(
                f"Invalid role '{role}'",
                details={"allowed": [member.value for member in CollaboratorRole]},
            ) from e
