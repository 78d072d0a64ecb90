"""Goal service layer with business logic."""

import logging
from collections.abc import Sequence
from uuid import UUID

from models import Goal, Task
from models.enums import GoalStatus, TaskStatus
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.collaboration.permissions import ProjectAction
from sacredsix.domains.completion.aggregator import percentage
from sacredsix.domains.goal.link_registry import GoalLinkRegistry, RelinkResult
from sacredsix.exceptions import GoalNotFoundError
from sacredsix.schemas.goal import GoalCreate, GoalUpdate
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)


def derive_progress(tasks: Sequence[Task]) -> tuple[int, GoalStatus]:
    """Progress percentage and status of a goal from its linked tasks."""
    if not tasks:
        return 0, GoalStatus.not_started
    done = sum(1 for task in tasks if task.status == TaskStatus.done)
    started = sum(1 for task in tasks if task.status == TaskStatus.in_progress)
    if done == len(tasks):
        status = GoalStatus.completed
    elif done or started:
        status = GoalStatus.in_progress
    else:
        status = GoalStatus.not_started
    return percentage(done, len(tasks)), status


class GoalService:
    """Service class for goal business logic."""

    def __init__(self, store: EntityStore, engine: CollaborationEngine | None = None):
        self.store = store
        self.engine = engine or CollaborationEngine(store)
        self.links = GoalLinkRegistry(store, self.engine)

    async def create_goal(self, goal_data: GoalCreate, user_id: UUID) -> Goal:
        async with self.store.transaction():
            await self.engine.authorize(goal_data.project_id, user_id, ProjectAction.edit_content)
            goal = Goal(
                project_id=goal_data.project_id,
                name=goal_data.name.strip(),
                description=goal_data.description,
                target_date=goal_data.target_date,
                status=GoalStatus.not_started,
                progress=0,
            )
            await self.store.put(goal)

        logger.info(f"User {user_id} created goal {goal.id} in project {goal.project_id}")
        return goal

    async def get_goal(self, goal_id: UUID, user_id: UUID) -> Goal:
        goal = await self._get_goal(goal_id)
        await self.engine.authorize(goal.project_id, user_id, ProjectAction.view)
        return await self.refresh_progress(goal)

    async def list_project_goals(self, project_id: UUID, user_id: UUID) -> list[Goal]:
        """Goals of a project with progress recomputed from their tasks."""
        await self.engine.authorize(project_id, user_id, ProjectAction.view)
        goals = await self.store.list(Goal, project_id=project_id, order_by=Goal.created_at)
        return [await self.refresh_progress(goal) for goal in goals]

    async def list_goal_tasks(self, goal_id: UUID, user_id: UUID) -> list[Task]:
        goal = await self._get_goal(goal_id)
        await self.engine.authorize(goal.project_id, user_id, ProjectAction.view)
        return await self.store.list(Task, goal_id=goal.id, order_by=Task.created_at)

    async def update_goal(self, goal_id: UUID, goal_data: GoalUpdate, user_id: UUID) -> Goal:
        async with self.store.transaction():
            goal = await self._get_goal(goal_id)
            await self.engine.authorize(goal.project_id, user_id, ProjectAction.edit_content)
            update_data = goal_data.model_dump(exclude_unset=True)
            name = (update_data.pop("name", None) or "").strip()
            if name:
                goal.name = name
            for field, value in update_data.items():
                setattr(goal, field, value)
            await self.store.put(goal)

        return await self.refresh_progress(goal)

    async def delete_goal(self, goal_id: UUID, user_id: UUID) -> int:
        return await self.links.delete_goal(goal_id, user_id)

    async def link_task(self, task_id: UUID, goal_id: UUID | None, user_id: UUID) -> Task:
        return await self.links.link_task_to_goal(task_id, goal_id, user_id)

    async def relink_tasks(self, goal_id: UUID, task_ids: list[UUID], user_id: UUID) -> RelinkResult:
        return await self.links.relink_tasks_to_goal(goal_id, task_ids, user_id)

    async def refresh_progress(self, goal: Goal) -> Goal:
        """Recompute progress and status, writing them back only when they changed."""
        tasks = await self.store.list(Task, goal_id=goal.id)
        progress, status = derive_progress(tasks)
        if progress != goal.progress or status != goal.status:
            async with self.store.transaction():
                goal.progress = progress
                goal.status = status
                await self.store.put(goal)
        return goal

    async def _get_goal(self, goal_id: UUID) -> Goal:
        goal = await self.store.get(Goal, goal_id)
        if goal is None:
            raise GoalNotFoundError()
        return goal
