"""Task service layer with business logic."""

import logging
from uuid import UUID

from sqlalchemy import or_

from models import Collaborator, Goal, Project, Task
from models.base import utc_today, utcnow
from models.enums import TaskStatus
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.collaboration.permissions import ProjectAction
from sacredsix.exceptions import (
    ConflictError,
    GoalNotFoundError,
    TaskNotFoundError,
    TodaySelectionError,
    ValidationError,
)
from sacredsix.schemas.task import MAX_TODAY_TASKS, TaskCreate, TaskUpdate
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)


def apply_status(task: Task, status: TaskStatus) -> None:
    """Set ``status`` and keep the completion stamps consistent with it."""
    previous = task.status
    task.status = status
    if status == TaskStatus.done and previous != TaskStatus.done:
        task.completed_at = utcnow()
        task.last_completed_date = utc_today()
    elif status != TaskStatus.done:
        task.completed_at = None


class TaskService:
    """Service class for task business logic."""

    def __init__(self, store: EntityStore, engine: CollaborationEngine | None = None):
        self.store = store
        self.engine = engine or CollaborationEngine(store)

    async def create_task(self, task_data: TaskCreate, user_id: UUID) -> Task:
        """Create a task; recurrence defaults come from the project when omitted."""
        async with self.store.transaction():
            project, _ = await self.engine.authorize(
                task_data.project_id, user_id, ProjectAction.edit_content
            )
            if task_data.goal_id is not None:
                await self._check_goal(task_data.goal_id, project)

            is_recurring = task_data.is_recurring
            if is_recurring is None:
                is_recurring = project.default_tasks_recurring
            if task_data.recurring_days is not None:
                recurring_days = [day.value for day in task_data.recurring_days]
            else:
                recurring_days = list(project.default_recurring_days or [])

            task = Task(
                project_id=project.id,
                user_id=user_id,
                goal_id=task_data.goal_id,
                name=task_data.name,
                description=task_data.description,
                status=TaskStatus.todo,
                priority=task_data.priority,
                estimated_time=task_data.estimated_time,
                due_date=task_data.due_date,
                is_selected_for_today=False,
                is_recurring=is_recurring,
                recurring_days=recurring_days if is_recurring else [],
            )
            await self.store.put(task)

        logger.info(f"User {user_id} created task {task.id} in project {project.id}")
        return task

    async def get_task(self, task_id: UUID, user_id: UUID) -> Task:
        """
        Get a task the user can view.

        Args:
            task_id: The task's unique identifier
            user_id: The requesting user

        Returns:
            Task: The task

        Raises:
            TaskNotFoundError: If the task does not exist
            AuthorizationError: If the user has no access to its project
        """
        task = await self._get_task(task_id)
        await self.engine.authorize(task.project_id, user_id, ProjectAction.view)
        return task

    async def list_project_tasks(self, project_id: UUID, user_id: UUID) -> list[Task]:
        await self.engine.authorize(project_id, user_id, ProjectAction.view)
        return await self.store.list(Task, project_id=project_id, order_by=Task.created_at)

    async def update_task(self, task_id: UUID, task_data: TaskUpdate, user_id: UUID) -> Task:
        """
        Update a task.

        Moving to ``done`` stamps ``completed_at`` and ``last_completed_date``;
        moving away from ``done`` clears ``completed_at``. Goal links are
        changed through the goal endpoints only.

        Args:
            task_id: The task to update
            task_data: Fields to change; unset fields are left alone
            user_id: The user making the change

        Returns:
            Task: The updated task

        Raises:
            TaskNotFoundError: If the task does not exist
            AuthorizationError: If the user is below editor on the project
            ValidationError: If the new name is blank
        """
        async with self.store.transaction():
            task = await self._get_task(task_id)
            await self.engine.authorize(task.project_id, user_id, ProjectAction.edit_content)

            update_data = task_data.model_dump(exclude_unset=True)
            if "name" in update_data:
                name = (update_data.pop("name") or "").strip()
                if not name:
                    raise ValidationError("Task name cannot be empty")
                task.name = name
            status = update_data.pop("status", None)
            if "recurring_days" in update_data:
                days = update_data.pop("recurring_days") or []
                task.recurring_days = [day.value for day in days]
            for field, value in update_data.items():
                if value is None and field in ("priority", "estimated_time", "is_recurring"):
                    continue
                setattr(task, field, value)

            previous = task.status
            if status is not None:
                apply_status(task, status)
            await self.store.put(task)

        if status is not None and status != previous:
            logger.info(f"Task {task.id} status changed {previous.value} -> {task.status.value} by user {user_id}")
        return task

    async def delete_task(self, task_id: UUID, user_id: UUID) -> bool:
        """
        Delete a task.

        Args:
            task_id: The task to delete
            user_id: The user deleting it; must be editor or above

        Returns:
            bool: True once the task is gone
        """
        async with self.store.transaction():
            task = await self._get_task(task_id)
            await self.engine.authorize(task.project_id, user_id, ProjectAction.edit_content)
            await self.store.delete(task)

        logger.info(f"User {user_id} deleted task {task_id}")
        return True

    async def select_for_today(self, user_id: UUID, task_ids: list[UUID]) -> list[Task]:
        """
        Replace the user's today-selection with ``task_ids``.

        The tasks the user created that were selected before are unselected
        first. Repeated ids count once.

        Args:
            user_id: The user making the selection
            task_ids: Up to six tasks, each in a project the user can view

        Returns:
            list[Task]: The user's selection after the change

        Raises:
            TodaySelectionError: If more than six distinct ids are given
            TaskNotFoundError: If an id does not exist; nothing is changed
            AuthorizationError: If a task is not visible to the user; nothing is changed
        """
        task_ids = list(dict.fromkeys(task_ids))
        if len(task_ids) > MAX_TODAY_TASKS:
            raise TodaySelectionError()

        async with self.store.transaction():
            await self.store.update_where(
                Task,
                {"is_selected_for_today": False},
                Task.user_id == user_id,
                Task.is_selected_for_today.is_(True),
            )
            for task_id in task_ids:
                task = await self._get_task(task_id)
                await self.engine.authorize(task.project_id, user_id, ProjectAction.view)
                task.is_selected_for_today = True
                await self.store.put(task)

        logger.info(f"User {user_id} selected {len(task_ids)} tasks for today")
        return await self.list_today(user_id)

    async def list_today(self, user_id: UUID) -> list[Task]:
        """Selected tasks the user created plus selected tasks of projects shared with them."""
        shared_ids = [
            row.project_id for row in await self.store.list(Collaborator, user_id=user_id)
        ]
        return await self.store.list(
            Task,
            Task.is_selected_for_today.is_(True),
            or_(Task.user_id == user_id, Task.project_id.in_(shared_ids)),
            order_by=Task.created_at,
        )

    async def _get_task(self, task_id: UUID) -> Task:
        task = await self.store.get(Task, task_id)
        if task is None:
            raise TaskNotFoundError()
        return task

    async def _check_goal(self, goal_id: UUID, project: Project) -> Goal:
        goal = await self.store.get(Goal, goal_id)
        if goal is None:
            raise GoalNotFoundError()
        if goal.project_id != project.id:
            raise ConflictError("A task can only be linked to a goal of its own project")
        return goal
