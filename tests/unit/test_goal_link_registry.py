"""Unit tests for GoalLinkRegistry."""

import uuid

import pytest

from models import Goal, Task
from sacredsix.domains.goal.link_registry import (
    SKIP_DIFFERENT_PROJECT,
    SKIP_LINKED_TO_OTHER_GOAL,
    SKIP_NOT_FOUND,
    GoalLinkRegistry,
)
from sacredsix.exceptions import (
    AuthorizationError,
    ConflictError,
    GoalNotFoundError,
    TaskNotFoundError,
)
from tests.factories import create_goal, create_project, create_task


@pytest.fixture
def registry(store, engine):
    return GoalLinkRegistry(store, engine)


class TestLinkTaskToGoal:
    @pytest.mark.asyncio
    async def test_link_and_replace(self, registry, store, owner, project):
        task = await create_task(store, project)
        first = await create_goal(store, project)
        second = await create_goal(store, project)

        await registry.link_task_to_goal(task.id, first.id, owner.id)
        result = await registry.link_task_to_goal(task.id, second.id, owner.id)

        assert result.goal_id == second.id
        assert await store.count(Task, goal_id=first.id) == 0

    @pytest.mark.asyncio
    async def test_unlink_with_none(self, registry, store, owner, project):
        goal = await create_goal(store, project)
        task = await create_task(store, project, goal_id=goal.id)

        result = await registry.link_task_to_goal(task.id, None, owner.id)

        assert result.goal_id is None

    @pytest.mark.asyncio
    async def test_goal_of_other_project_conflicts(self, registry, store, owner, project):
        other_project = await create_project(store, owner)
        task = await create_task(store, project)
        task_id = task.id
        foreign_goal = await create_goal(store, other_project)

        with pytest.raises(ConflictError):
            await registry.link_task_to_goal(task_id, foreign_goal.id, owner.id)

        stored = await store.get(Task, task_id)
        await store.refresh(stored)
        assert stored.goal_id is None

    @pytest.mark.asyncio
    async def test_unknown_ids(self, registry, store, owner, project):
        task_id = (await create_task(store, project)).id
        owner_id = owner.id

        with pytest.raises(TaskNotFoundError):
            await registry.link_task_to_goal(uuid.uuid4(), None, owner_id)
        with pytest.raises(GoalNotFoundError):
            await registry.link_task_to_goal(task_id, uuid.uuid4(), owner_id)

    @pytest.mark.asyncio
    async def test_viewer_cannot_link(self, registry, store, shared_project, viewer_user):
        task = await create_task(store, shared_project)
        goal = await create_goal(store, shared_project)

        with pytest.raises(AuthorizationError):
            await registry.link_task_to_goal(task.id, goal.id, viewer_user.id)


class TestRelinkTasksToGoal:
    @pytest.mark.asyncio
    async def test_relink_links_unlinks_and_skips(self, registry, store, owner, project):
        goal = await create_goal(store, project)
        other_goal = await create_goal(store, project)
        keep = await create_task(store, project, goal_id=goal.id)
        drop = await create_task(store, project, goal_id=goal.id)
        free = await create_task(store, project)
        taken = await create_task(store, project, goal_id=other_goal.id)
        foreign = await create_task(store, await create_project(store, owner))
        missing = uuid.uuid4()

        result = await registry.relink_tasks_to_goal(
            goal.id, [keep.id, free.id, taken.id, foreign.id, missing], owner.id
        )

        assert result.linked == [free.id]
        assert result.unlinked == [drop.id]
        assert result.unchanged == [keep.id]
        assert result.skipped == [
            (taken.id, SKIP_LINKED_TO_OTHER_GOAL),
            (foreign.id, SKIP_DIFFERENT_PROJECT),
            (missing, SKIP_NOT_FOUND),
        ]
        linked = {task.id for task in await store.list(Task, goal_id=goal.id)}
        assert linked == {keep.id, free.id}
        assert (await store.get(Task, taken.id)).goal_id == other_goal.id

    @pytest.mark.asyncio
    async def test_relink_is_idempotent(self, registry, store, owner, project):
        goal = await create_goal(store, project)
        tasks = [await create_task(store, project) for _ in range(3)]
        desired = [task.id for task in tasks[:2]]

        first = await registry.relink_tasks_to_goal(goal.id, desired, owner.id)
        second = await registry.relink_tasks_to_goal(goal.id, desired, owner.id)

        assert first.changed is True
        assert second.changed is False
        assert sorted(second.unchanged) == sorted(desired)

    @pytest.mark.asyncio
    async def test_empty_set_unlinks_everything(self, registry, store, owner, project):
        goal = await create_goal(store, project)
        for _ in range(2):
            await create_task(store, project, goal_id=goal.id)

        result = await registry.relink_tasks_to_goal(goal.id, [], owner.id)

        assert len(result.unlinked) == 2
        assert await store.count(Task, goal_id=goal.id) == 0

    @pytest.mark.asyncio
    async def test_relink_is_all_or_nothing(self, registry, store, owner, project, monkeypatch):
        goal = await create_goal(store, project)
        goal_id = goal.id
        linked = await create_task(store, project, goal_id=goal_id)
        linked_id = linked.id
        free = await create_task(store, project)
        free_id = free.id

        original_put = store.put
        calls = {"count": 0}

        async def failing_put(record):
            calls["count"] += 1
            if calls["count"] == 2:
                raise RuntimeError("storage went away")
            return await original_put(record)

        monkeypatch.setattr(store, "put", failing_put)

        with pytest.raises(RuntimeError):
            await registry.relink_tasks_to_goal(goal_id, [free_id], owner.id)

        monkeypatch.setattr(store, "put", original_put)
        for task_id, expected in ((linked_id, goal_id), (free_id, None)):
            task = await store.get(Task, task_id)
            await store.refresh(task)
            assert task.goal_id == expected


class TestDeleteGoal:
    @pytest.mark.asyncio
    async def test_delete_goal_unlinks_tasks(self, registry, store, owner, project):
        goal = await create_goal(store, project)
        tasks = [await create_task(store, project, goal_id=goal.id) for _ in range(3)]

        unlinked = await registry.delete_goal(goal.id, owner.id)

        assert unlinked == 3
        assert await store.get(Goal, goal.id) is None
        for task in tasks:
            assert (await store.get(Task, task.id)).goal_id is None

    @pytest.mark.asyncio
    async def test_delete_unknown_goal(self, registry, owner):
        with pytest.raises(GoalNotFoundError):
            await registry.delete_goal(uuid.uuid4(), owner.id)

    @pytest.mark.asyncio
    async def test_viewer_cannot_delete_goal(self, registry, store, shared_project, viewer_user):
        goal = await create_goal(store, shared_project)

        with pytest.raises(AuthorizationError):
            await registry.delete_goal(goal.id, viewer_user.id)
