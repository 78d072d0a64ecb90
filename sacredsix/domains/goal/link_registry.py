"""Task-to-goal links.

A task references at most one goal, and only a goal of its own project.
All link changes, including the unlink cascade when a goal is deleted, go
through ``GoalLinkRegistry``.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from models import Goal, Task
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.collaboration.permissions import ProjectAction
from sacredsix.exceptions import ConflictError, GoalNotFoundError, TaskNotFoundError
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)

SKIP_NOT_FOUND = "not_found"
SKIP_DIFFERENT_PROJECT = "different_project"
SKIP_LINKED_TO_OTHER_GOAL = "linked_to_other_goal"


@dataclass
class RelinkResult:
    linked: list[UUID] = field(default_factory=list)
    unlinked: list[UUID] = field(default_factory=list)
    unchanged: list[UUID] = field(default_factory=list)
    # (task_id, reason) pairs
    skipped: list[tuple[UUID, str]] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.linked or self.unlinked)


class GoalLinkRegistry:
    def __init__(self, store: EntityStore, engine: CollaborationEngine):
        self.store = store
        self.engine = engine

    async def link_task_to_goal(self, task_id: UUID, goal_id: UUID | None, actor_id: UUID) -> Task:
        """Point the task at ``goal_id``, replacing any previous link.

        ``goal_id=None`` unlinks the task.

        Raises:
            TaskNotFoundError / GoalNotFoundError: Unknown ids.
            ConflictError: The goal belongs to a different project.
            AuthorizationError: The actor is below editor on the task's project.
        """
        async with self.store.transaction():
            task = await self.store.get(Task, task_id)
            if task is None:
                raise TaskNotFoundError()
            await self.engine.authorize(task.project_id, actor_id, ProjectAction.edit_content)

            if goal_id is not None:
                goal = await self._get_goal(goal_id)
                if goal.project_id != task.project_id:
                    raise ConflictError(
                        "A task can only be linked to a goal of its own project",
                        details={"task_project_id": str(task.project_id), "goal_project_id": str(goal.project_id)},
                    )

            previous = task.goal_id
            task.goal_id = goal_id
            await self.store.put(task)

        logger.info(f"Task {task.id} goal link {previous} -> {goal_id}")
        return task

    async def relink_tasks_to_goal(
        self, goal_id: UUID, desired_task_ids: list[UUID], actor_id: UUID
    ) -> RelinkResult:
        """Make ``desired_task_ids`` the set of tasks linked to the goal.

        Tasks currently on the goal but not desired are unlinked; desired
        tasks with no goal are linked. Desired tasks that are linked to a
        different goal, missing, or in another project are reported in
        ``skipped`` and left alone. The whole change is one transaction and
        repeating the call with the same ids changes nothing.
        """
        desired = list(dict.fromkeys(desired_task_ids))
        result = RelinkResult()

        async with self.store.transaction():
            goal = await self._get_goal(goal_id)
            await self.engine.authorize(goal.project_id, actor_id, ProjectAction.edit_content)

            current = await self.store.list(Task, goal_id=goal.id)
            desired_set = set(desired)
            for task in current:
                if task.id not in desired_set:
                    task.goal_id = None
                    await self.store.put(task)
                    result.unlinked.append(task.id)

            found = {task.id: task for task in await self.store.list(Task, Task.id.in_(desired))} if desired else {}
            for task_id in desired:
                task = found.get(task_id)
                if task is None:
                    result.skipped.append((task_id, SKIP_NOT_FOUND))
                elif task.project_id != goal.project_id:
                    result.skipped.append((task_id, SKIP_DIFFERENT_PROJECT))
                elif task.goal_id == goal.id:
                    result.unchanged.append(task_id)
                elif task.goal_id is not None:
                    result.skipped.append((task_id, SKIP_LINKED_TO_OTHER_GOAL))
                else:
                    task.goal_id = goal.id
                    await self.store.put(task)
                    result.linked.append(task_id)

        logger.info(
            f"Relinked goal {goal_id}: {len(result.linked)} linked, {len(result.unlinked)} unlinked, "
            f"{len(result.unchanged)} unchanged, {len(result.skipped)} skipped"
        )
        return result

    async def delete_goal(self, goal_id: UUID, actor_id: UUID) -> int:
        """Unlink every task referencing the goal, then delete it.

        Returns the number of tasks that were unlinked.
        """
        async with self.store.transaction():
            goal = await self._get_goal(goal_id)
            await self.engine.authorize(goal.project_id, actor_id, ProjectAction.edit_content)
            unlinked = await self.store.update_where(Task, {"goal_id": None}, Task.goal_id == goal.id)
            await self.store.delete(goal)

        logger.info(f"Deleted goal {goal_id} and unlinked {unlinked} tasks")
        return unlinked

    async def _get_goal(self, goal_id: UUID) -> Goal:
        goal = await self.store.get(Goal, goal_id)
        if goal is None:
            raise GoalNotFoundError()
        return goal
