"""Project service layer with business logic."""

import logging
from uuid import UUID

from sqlalchemy import or_

from models import Collaborator, Goal, Project, ShareInvitation, Task
from models.enums import ProjectRole
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.collaboration.permissions import ProjectAction
from sacredsix.domains.project.guard import CardinalityGuard
from sacredsix.exceptions import ValidationError
from sacredsix.schemas.project import ProjectCreate, ProjectUpdate, RecurringSettings
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)


class ProjectService:
    """Service class for project business logic."""

    def __init__(self, store: EntityStore, engine: CollaborationEngine | None = None):
        self.store = store
        self.engine = engine or CollaborationEngine(store)
        self.guard = CardinalityGuard(store, self.engine)

    async def create_project(self, project_data: ProjectCreate, user_id: UUID) -> Project:
        """Create a project owned by ``user_id`` at the end of their list.

        A project created as sacred counts against the owner's cap.
        """
        async with self.store.transaction():
            if project_data.is_sacred:
                await self.guard.ensure_capacity_for_new(user_id)

            last = await self.store.first(
                Project, owner_id=user_id, order_by=Project.sort_order.desc()
            )
            project = Project(
                owner_id=user_id,
                name=project_data.name,
                description=project_data.description,
                tags=list(project_data.tags),
                is_sacred=project_data.is_sacred,
                is_archived=False,
                sort_order=last.sort_order + 1 if last else 0,
                default_tasks_recurring=project_data.default_tasks_recurring,
                default_recurring_days=[day.value for day in project_data.default_recurring_days],
            )
            await self.store.put(project)

        logger.info(f"User {user_id} created project {project.id} (sacred={project.is_sacred})")
        return project

    async def get_project(self, project_id: UUID, user_id: UUID) -> tuple[Project, ProjectRole]:
        """Get a project the user can view, with the user's role on it."""
        return await self.engine.authorize(project_id, user_id, ProjectAction.view)

    async def list_projects(
        self,
        user_id: UUID,
        include_archived: bool = False,
        archived_only: bool = False,
        scope: str = "all",
    ) -> list[Project]:
        """Projects the user owns and/or collaborates on, in sort order.

        ``scope`` is ``all``, ``owned`` or ``shared``.
        """
        shared_ids = [
            row.project_id for row in await self.store.list(Collaborator, user_id=user_id)
        ]
        if scope == "owned":
            access = Project.owner_id == user_id
        elif scope == "shared":
            access = Project.id.in_(shared_ids)
        elif scope == "all":
            access = or_(Project.owner_id == user_id, Project.id.in_(shared_ids))
        else:
            raise ValidationError(f"Unknown project scope '{scope}'")

        criteria = [access]
        if archived_only:
            criteria.append(Project.is_archived.is_(True))
        elif not include_archived:
            criteria.append(Project.is_archived.is_(False))

        return await self.store.list(
            Project, *criteria, order_by=(Project.sort_order, Project.created_at)
        )

    async def list_sacred(self, user_id: UUID) -> list[Project]:
        """The owner's sacred, non-archived projects."""
        return await self.store.list(
            Project,
            owner_id=user_id,
            is_sacred=True,
            is_archived=False,
            order_by=Project.sort_order,
        )

    async def update_project(
        self, project_id: UUID, project_data: ProjectUpdate, user_id: UUID
    ) -> Project:
        """Update a project's descriptive fields."""
        async with self.store.transaction():
            project, _ = await self.engine.authorize(project_id, user_id, ProjectAction.edit_project)
            update_data = project_data.model_dump(exclude_unset=True)
            if "name" in update_data and update_data["name"] is None:
                raise ValidationError("Project name cannot be empty")
            for field, value in update_data.items():
                setattr(project, field, value)
            await self.store.put(project)

        return project

    async def set_sacred(self, project_id: UUID, user_id: UUID, is_sacred: bool) -> Project:
        return await self.guard.apply_sacred_toggle(user_id, project_id, is_sacred)

    async def set_archived(self, project_id: UUID, user_id: UUID, is_archived: bool) -> Project:
        """Archive or un-archive a project.

        Archiving keeps ``is_sacred``. Un-archiving a sacred project whose
        owner has meanwhile filled all six slots clears the flag.
        """
        async with self.store.transaction():
            project, _ = await self.engine.authorize(project_id, user_id, ProjectAction.edit_project)
            was_archived = project.is_archived
            project.is_archived = is_archived
            await self.store.put(project)
            if was_archived and not is_archived:
                await self.guard.reconcile_unarchived(project)

        logger.info(f"User {user_id} set is_archived={is_archived} on project {project.id}")
        return project

    async def update_recurring_settings(
        self, project_id: UUID, user_id: UUID, settings: RecurringSettings
    ) -> Project:
        async with self.store.transaction():
            project, _ = await self.engine.authorize(project_id, user_id, ProjectAction.edit_project)
            project.default_tasks_recurring = settings.default_tasks_recurring
            project.default_recurring_days = [day.value for day in settings.default_recurring_days]
            await self.store.put(project)

        return project

    async def reorder_projects(self, user_id: UUID, project_ids: list[UUID]) -> list[Project]:
        """
        Give each listed project its position as ``sort_order``.

        ``sort_order`` is shared by everyone with access to the project, so it
        is edited like any other project field.

        Args:
            user_id: The user reordering; owner or admin of every project
            project_ids: Distinct project ids in their new order

        Returns:
            list[Project]: The projects in the given order

        Raises:
            ValidationError: If an id is repeated
            AuthorizationError: If the user may not edit one of the projects;
                no project is changed
        """
        if len(set(project_ids)) != len(project_ids):
            raise ValidationError("Project ids must be unique")

        async with self.store.transaction():
            projects = {}
            for project_id in project_ids:
                project, _ = await self.engine.authorize(project_id, user_id, ProjectAction.edit_project)
                projects[project_id] = project
            for index, project_id in enumerate(project_ids):
                projects[project_id].sort_order = index
                await self.store.put(projects[project_id])

        return [projects[project_id] for project_id in project_ids]

    async def delete_project(self, project_id: UUID, user_id: UUID) -> bool:
        """Delete a project with its tasks, goals, collaborators and invitations."""
        async with self.store.transaction():
            project, _ = await self.engine.authorize(project_id, user_id, ProjectAction.delete_project)
            tasks = await self.store.delete_where(Task, project_id=project.id)
            await self.store.delete_where(Goal, project_id=project.id)
            await self.store.delete_where(Collaborator, project_id=project.id)
            await self.store.delete_where(ShareInvitation, project_id=project.id)
            await self.store.delete(project)

        logger.info(f"User {user_id} deleted project {project_id} with {tasks} tasks")
        return True
