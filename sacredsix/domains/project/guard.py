"""Enforces the focus cap on sacred projects."""

import logging
from uuid import UUID

from models import Project
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.collaboration.permissions import ProjectAction
from sacredsix.exceptions import CapacityExceededError
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)

MAX_SACRED_PROJECTS = 6


class CardinalityGuard:
    """Keeps every owner at or below six sacred, non-archived projects.

    The count is always taken from storage and always against the project's
    owner, whoever is making the change. Each check-and-write runs inside one
    transaction holding the owner's row lock, so two concurrent toggles for
    the same owner cannot both see five and both write a sixth.
    """

    def __init__(self, store: EntityStore, engine: CollaborationEngine):
        self.store = store
        self.engine = engine

    async def can_mark_sacred(self, user_id: UUID, project_id: UUID) -> bool:
        """Whether marking the project sacred would keep its owner within the cap.

        Already-sacred projects always report ``True``.
        """
        project, _ = await self.engine.authorize(project_id, user_id, ProjectAction.view)
        if project.is_sacred:
            return True
        return await self.sacred_count(project.owner_id, exclude=project.id) < MAX_SACRED_PROJECTS

    async def sacred_count(self, owner_id: UUID, exclude: UUID | None = None) -> int:
        """Number of sacred, non-archived projects of ``owner_id``."""
        criteria = [Project.id != exclude] if exclude is not None else []
        return await self.store.count(
            Project,
            *criteria,
            owner_id=owner_id,
            is_sacred=True,
            is_archived=False,
        )

    async def apply_sacred_toggle(self, user_id: UUID, project_id: UUID, desired: bool) -> Project:
        """Set ``is_sacred`` to ``desired``; no other field changes.

        Raises:
            ProjectNotFoundError: If the project does not exist.
            AuthorizationError: If the caller may not edit the project.
            CapacityExceededError: If the owner already has six other sacred,
                non-archived projects.
        """
        async with self.store.transaction():
            project, _ = await self.engine.authorize(project_id, user_id, ProjectAction.edit_project)
            if desired and not project.is_sacred:
                await self.store.lock_owner(project.owner_id)
                # Archived projects are outside the cap until they come back
                if not project.is_archived:
                    await self._ensure_capacity(project.owner_id, exclude=project.id)
            project.is_sacred = desired
            await self.store.put(project)

        logger.info(f"User {user_id} set is_sacred={desired} on project {project.id} (owner {project.owner_id})")
        return project

    async def ensure_capacity_for_new(self, owner_id: UUID) -> None:
        """Check the cap before creating a sacred project for ``owner_id``.

        Must be called inside the creating transaction so the owner lock is
        held until the new row is written.
        """
        await self.store.lock_owner(owner_id)
        await self._ensure_capacity(owner_id)

    async def reconcile_unarchived(self, project: Project) -> bool:
        """Clear ``is_sacred`` on a just un-archived project that no longer fits.

        Returns ``True`` when the flag was cleared. The caller's transaction
        is joined; nothing is raised to the user.
        """
        if not project.is_sacred or project.is_archived:
            return False

        async with self.store.transaction():
            await self.store.lock_owner(project.owner_id)
            if await self.sacred_count(project.owner_id, exclude=project.id) < MAX_SACRED_PROJECTS:
                return False
            project.is_sacred = False
            await self.store.put(project)

        logger.info(
            f"Cleared is_sacred on un-archived project {project.id}: "
            f"owner {project.owner_id} is at the limit of {MAX_SACRED_PROJECTS}"
        )
        return True

    async def _ensure_capacity(self, owner_id: UUID, exclude: UUID | None = None) -> None:
        count = await self.sacred_count(owner_id, exclude=exclude)
        if count >= MAX_SACRED_PROJECTS:
            logger.info(f"Owner {owner_id} already has {count} sacred projects")
            raise CapacityExceededError(limit=MAX_SACRED_PROJECTS)
